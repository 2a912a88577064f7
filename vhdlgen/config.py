"""Formatting configuration for vhdlgen (.vhdlgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ._version import __version__
from .errors import VhdlGenError
from .templating.constants import (
    DEFAULT_COPYRIGHT,
    DEFAULT_FILE_HEADER,
    DEFAULT_LICENSE,
    DEFAULT_SECTION_END,
    DEFAULT_SECTION_START,
)

CONFIG_FILENAME = ".vhdlgen.yml"


class ConfigError(VhdlGenError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass(frozen=True)
class FormattingConfig:
    """Settings consulted by every stage of a generation run.

    Instances are immutable; derive variations with :meth:`with_overrides`.
    Templates set to ``None`` or left empty are omitted from the output.
    """

    tab_size: int = 4
    use_tabs: bool = True
    max_line_width: int = 130
    flower_box_char: Optional[str] = "-"
    include_sub_header: bool = True
    add_optional_type_names: bool = True
    add_optional_names: bool = True
    add_space_after_keywords: bool = True
    file_header_template: Tuple[str, ...] = DEFAULT_FILE_HEADER
    copyright_template: Optional[str] = DEFAULT_COPYRIGHT
    license_template: Tuple[str, ...] = DEFAULT_LICENSE
    section_start_template: Optional[str] = DEFAULT_SECTION_START
    section_end_template: Optional[str] = DEFAULT_SECTION_END
    developer: str = "Specify your developer name by setting identity.developer in .vhdlgen.yml"
    company: str = "Specify your company name by setting identity.company in .vhdlgen.yml"
    app_name: str = "vhdlgen"
    app_version: str = __version__
    library_name: str = "vhdlgen"
    library_version: str = __version__
    file_extension: str = "vhdl"

    def __post_init__(self) -> None:
        if isinstance(self.tab_size, bool) or not isinstance(self.tab_size, int) or self.tab_size <= 0:
            raise ConfigError(f"tab_size must be a positive integer, got {self.tab_size!r}")
        if (
            isinstance(self.max_line_width, bool)
            or not isinstance(self.max_line_width, int)
            or self.max_line_width <= 0
        ):
            raise ConfigError(
                f"max_line_width must be a positive integer, got {self.max_line_width!r}"
            )
        if self.flower_box_char is not None and len(self.flower_box_char) != 1:
            raise ConfigError(
                f"flower_box_char must be a single character or null, got {self.flower_box_char!r}"
            )
        if not self.file_extension or "/" in self.file_extension:
            raise ConfigError(f"file_extension is not usable: {self.file_extension!r}")
        # Sequences arrive as lists from YAML or callers; store them as tuples.
        object.__setattr__(self, "file_header_template", tuple(self.file_header_template or ()))
        object.__setattr__(self, "license_template", tuple(self.license_template or ()))

    def with_overrides(self, **changes: Any) -> "FormattingConfig":
        """Return a copy with the given fields replaced."""
        unknown = set(changes) - {item.name for item in fields(self)}
        if unknown:
            raise ConfigError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)


_FORMATTING_KEYS = {
    "tab_size": "int",
    "use_tabs": "bool",
    "max_line_width": "int",
    "include_sub_header": "bool",
    "add_optional_type_names": "bool",
    "add_optional_names": "bool",
    "add_space_after_keywords": "bool",
    "file_extension": "str",
}

_IDENTITY_KEYS = ("developer", "company", "app_name", "app_version")

_TEMPLATE_KEYS = {
    "file_header": ("file_header_template", "lines"),
    "copyright": ("copyright_template", "text"),
    "license": ("license_template", "lines"),
    "section_start": ("section_start_template", "text"),
    "section_end": ("section_end_template", "text"),
}


def load_config(config_path: Path) -> FormattingConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return FormattingConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    values: Dict[str, Any] = {}

    formatting = _as_dict(data.get("formatting"))
    for key, kind in _FORMATTING_KEYS.items():
        if key not in formatting:
            continue
        values[key] = _coerce(formatting[key], kind, f"formatting.{key}")
    if "flower_box_char" in formatting:
        raw = formatting["flower_box_char"]
        values["flower_box_char"] = None if raw in (None, "") else str(raw)

    identity = _as_dict(data.get("identity"))
    for key in _IDENTITY_KEYS:
        value = _as_str(identity.get(key))
        if value is not None:
            values[key] = value

    templates = _as_dict(data.get("templates"))
    for key, (field_name, kind) in _TEMPLATE_KEYS.items():
        if key not in templates:
            continue
        raw = templates[key]
        if kind == "lines":
            values[field_name] = _as_lines(raw)
        else:
            values[field_name] = _as_str(raw) if raw is not None else None

    return FormattingConfig(**values)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _coerce(value: Any, kind: str, label: str) -> Any:
    if kind == "int":
        result = _as_int(value)
    elif kind == "bool":
        result = _as_bool(value)
    else:
        result = _as_str(value)
    if result is None:
        raise ConfigError(f"{label} has an invalid value: {value!r}")
    return result


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_lines(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.splitlines())
    if isinstance(value, (list, tuple)):
        return tuple("" if item is None else str(item) for item in value)
    raise ConfigError(f"Expected a list of template lines, got {type(value).__name__}")


__all__ = ["CONFIG_FILENAME", "ConfigError", "FormattingConfig", "load_config"]
