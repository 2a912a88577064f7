"""Build a :class:`ModuleDescription` from a YAML document.

The document mirrors the data holders of :mod:`vhdlgen.models`::

    entity:
      name: counter
      description: Free running counter.
      generics:
        - {name: WIDTH, type: natural, default: "8", description: Counter width.}
      ports:
        - {name: clk, direction: in, type: std_logic, description: Clock.}
    declarations:
      - {kind: subtype, name: count_t, type: "unsigned(WIDTH - 1 downto 0)", description: Count.}
    signals:
      - {name: count, type: count_t, description: Current count.}
    sub_modules:
      - {name: u_sync, component: sync, port_map: {d: rst, q: rst_sync}, description: ...}

Sub-modules reference entries of ``components`` by name. Bodies and
statements may be given as a list of lines or as one block string.
"""

from __future__ import annotations

from dataclasses import MISSING, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import InvalidArgumentError
from .logging import get_logger
from .models import (
    DEFAULT_USES,
    Alias,
    AttributeDeclaration,
    AttributeSpecification,
    Component,
    Declaration,
    Entity,
    Function,
    Generate,
    Generic,
    ModuleDescription,
    Parameter,
    Port,
    Procedure,
    ProcedureParameter,
    Process,
    Signal,
    SubModule,
    Variable,
)

logger = get_logger("loader")


def load_module(path: Path | str) -> ModuleDescription:
    """Read and build the module description stored at ``path``."""
    source = Path(path).expanduser()
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidArgumentError(f"Cannot read module description {source}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidArgumentError(f"Failed to parse {source.name}: {exc}") from exc
    module = module_from_dict(data)
    logger.debug("Loaded module %s from %s", module.entity.name, source)
    return module


def module_from_dict(data: Any) -> ModuleDescription:
    """Build a module description from already parsed YAML data."""
    root = _mapping(data, "module description")
    _check_keys(
        root,
        {
            "entity",
            "architecture",
            "description",
            "uses",
            "declarations",
            "functions",
            "procedures",
            "components",
            "signals",
            "aliases",
            "attributes",
            "statements",
            "processes",
            "generates",
            "sub_modules",
        },
        "module description",
    )
    if "entity" not in root:
        raise InvalidArgumentError("module description has no entity")

    entity = _entity(root["entity"])
    components = [_component(item) for item in _items(root, "components")]
    by_name = {component.name.lower(): component for component in components}

    uses = root.get("uses")
    return ModuleDescription(
        entity=entity,
        architecture=str(root.get("architecture") or "rtl"),
        description=_optional_text(root.get("description")),
        uses=list(DEFAULT_USES) if uses is None else uses,
        declarations=[_make(Declaration, item, "declaration") for item in _items(root, "declarations")],
        functions=[_function(item) for item in _items(root, "functions")],
        procedures=[_procedure(item) for item in _items(root, "procedures")],
        components=components,
        signals=[_make(Signal, item, "signal") for item in _items(root, "signals")],
        aliases=[_make(Alias, item, "alias") for item in _items(root, "aliases")],
        attributes=_attributes(_items(root, "attributes")),
        statements=_lines(root.get("statements")),
        processes=[_process(item) for item in _items(root, "processes")],
        generates=[_generate(item, by_name) for item in _items(root, "generates")],
        sub_modules=[_sub_module(item, by_name) for item in _items(root, "sub_modules")],
    )


def _entity(data: Any) -> Entity:
    return _make(
        Entity,
        data,
        "entity",
        generics=[_make(Generic, item, "generic") for item in _items(data, "generics")],
        ports=[_make(Port, item, "port") for item in _items(data, "ports")],
    )


def _component(data: Any) -> Component:
    return _make(
        Component,
        data,
        "component",
        generics=[_make(Generic, item, "generic") for item in _items(data, "generics")],
        ports=[_make(Port, item, "port") for item in _items(data, "ports")],
    )


def _variables(data: Any) -> List[Variable]:
    return [_make(Variable, item, "variable") for item in _items(data, "variables")]


def _function(data: Any) -> Function:
    return _make(
        Function,
        data,
        "function",
        parameters=[_make(Parameter, item, "parameter") for item in _items(data, "parameters")],
        variables=_variables(data),
        body=_lines(_mapping(data, "function").get("body")),
    )


def _procedure(data: Any) -> Procedure:
    return _make(
        Procedure,
        data,
        "procedure",
        parameters=[
            _make(ProcedureParameter, item, "parameter") for item in _items(data, "parameters")
        ],
        variables=_variables(data),
        body=_lines(_mapping(data, "procedure").get("body")),
    )


def _process(data: Any) -> Process:
    mapping = _mapping(data, "process")
    return _make(
        Process,
        data,
        "process",
        sensitivity=mapping.get("sensitivity"),
        variables=_variables(data),
        body=_lines(mapping.get("body")),
    )


def _attributes(items: List[Any]) -> List[AttributeSpecification]:
    specs: List[AttributeSpecification] = []
    for item in items:
        mapping = _mapping(item, "attribute")
        declaration = _make(
            AttributeDeclaration,
            {key: value for key, value in mapping.items() if key != "apply"},
            "attribute",
        )
        if not _items(mapping, "apply"):
            logger.warning("Attribute %s is never applied and will not be emitted", declaration.name)
        for applied in _items(mapping, "apply"):
            specs.append(_make(AttributeSpecification, applied, "attribute", declaration=declaration))
    return specs


def _generate(data: Any, components: Mapping[str, Component]) -> Generate:
    mapping = _mapping(data, "generate")
    return _make(
        Generate,
        data,
        "generate",
        statements=_lines(mapping.get("statements")),
        processes=[_process(item) for item in _items(mapping, "processes")],
        generates=[_generate(item, components) for item in _items(mapping, "generates")],
        sub_modules=[_sub_module(item, components) for item in _items(mapping, "sub_modules")],
    )


def _sub_module(data: Any, components: Mapping[str, Component]) -> SubModule:
    mapping = _mapping(data, "sub-module")
    reference = mapping.get("component")
    component = components.get(str(reference).lower()) if reference is not None else None
    if component is None:
        raise InvalidArgumentError(
            f"Sub-module {mapping.get('name')!r} references unknown component {reference!r}"
        )
    return _make(
        SubModule,
        data,
        "sub-module",
        component=component,
        generic_map=_string_map(mapping.get("generic_map"), "generic_map"),
        port_map=_string_map(mapping.get("port_map"), "port_map"),
    )


def _make(cls: type, data: Any, label: str, **built: Any) -> Any:
    """Instantiate ``cls`` from ``data``, letting ``built`` override raw values."""
    mapping = _mapping(data, label)
    known = {item.name: item for item in fields(cls)}
    _check_keys(mapping, set(known), label)

    values: Dict[str, Any] = {}
    for name, item_field in known.items():
        if name in built:
            values[name] = built[name]
        elif name in mapping:
            values[name] = _scalar(mapping[name])
        elif item_field.default is MISSING and item_field.default_factory is MISSING:
            where = mapping.get("name") or label
            raise InvalidArgumentError(f"{label} {where!s} is missing {name}")
    return cls(**values)


def _scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip("\n") if "\n" in value.strip("\n") else value.strip()
    return value


def _mapping(data: Any, label: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"{label} must be a mapping, got {type(data).__name__}")
    return data


def _items(data: Any, key: str) -> List[Any]:
    value = data.get(key) if isinstance(data, dict) else None
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidArgumentError(f"{key} must be a list, got {type(value).__name__}")
    return value


def _lines(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.strip("\n").splitlines()
    if isinstance(value, list):
        return ["" if line is None else str(line) for line in value]
    raise InvalidArgumentError(f"Expected text lines, got {type(value).__name__}")


def _string_map(value: Any, label: str) -> Dict[str, str]:
    if value is None:
        return {}
    mapping = _mapping(value, label)
    return {str(key): str(_scalar(item)) for key, item in mapping.items()}


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value).strip()


def _check_keys(mapping: Mapping[str, Any], allowed: set, label: str) -> None:
    unknown = sorted(str(key) for key in mapping if key not in allowed)
    if unknown:
        raise InvalidArgumentError(f"Unknown keys in {label}: {', '.join(unknown)}")


__all__ = ["load_module", "module_from_dict"]
