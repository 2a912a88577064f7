"""Tests for vhdlgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from vhdlgen.config import ConfigError, FormattingConfig, load_config
from vhdlgen.templating.constants import DEFAULT_FILE_HEADER


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == FormattingConfig()
    assert config.tab_size == 4
    assert config.use_tabs is True
    assert config.max_line_width == 130
    assert config.flower_box_char == "-"
    assert config.file_header_template == DEFAULT_FILE_HEADER
    assert config.file_extension == "vhdl"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".vhdlgen.yml"
    config_file.write_text(
        """
formatting:
  tab_size: 2
  use_tabs: false
  max_line_width: "100"
  flower_box_char: "="
  include_sub_header: "no"
  add_optional_type_names: false
  add_space_after_keywords: false
  file_extension: vhd
identity:
  developer: "Jane Doe"
  company: Acme
  app_name: builder
  app_version: 2.1
templates:
  file_header:
    - "-- <%filename%>"
    - "-- <%description%>"
  copyright: "(c) <%company%> <%year%>"
  license: |
    Licensed under the MIT license.
    See LICENSE for details.
  section_start: "-- <%param%>"
  section_end: null
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.tab_size == 2
    assert config.use_tabs is False
    assert config.max_line_width == 100
    assert config.flower_box_char == "="
    assert config.include_sub_header is False
    assert config.add_optional_type_names is False
    assert config.add_optional_names is True
    assert config.add_space_after_keywords is False
    assert config.file_extension == "vhd"
    assert config.developer == "Jane Doe"
    assert config.company == "Acme"
    assert config.app_name == "builder"
    assert config.app_version == "2.1"
    assert config.file_header_template == ("-- <%filename%>", "-- <%description%>")
    assert config.copyright_template == "(c) <%company%> <%year%>"
    assert config.license_template == ("Licensed under the MIT license.", "See LICENSE for details.")
    assert config.section_start_template == "-- <%param%>"
    assert config.section_end_template is None


def test_directory_and_file_paths_are_equivalent(tmp_path: Path) -> None:
    (tmp_path / ".vhdlgen.yml").write_text("formatting:\n  tab_size: 3\n", encoding="utf-8")
    assert load_config(tmp_path) == load_config(tmp_path / ".vhdlgen.yml")


def test_null_flower_character_disables_flower_boxes(tmp_path: Path) -> None:
    (tmp_path / ".vhdlgen.yml").write_text("formatting:\n  flower_box_char: null\n", encoding="utf-8")
    assert load_config(tmp_path).flower_box_char is None


def test_empty_config_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / ".vhdlgen.yml").write_text("   \n", encoding="utf-8")
    assert load_config(tmp_path) == FormattingConfig()


def test_malformed_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".vhdlgen.yml").write_text("formatting: [broken\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".vhdlgen.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    (tmp_path / ".vhdlgen.yml").write_text("formatting:\n  tab_size: wide\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="formatting.tab_size"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "changes",
    [
        {"tab_size": 0},
        {"max_line_width": -1},
        {"tab_size": True},
        {"flower_box_char": "=="},
        {"file_extension": ""},
    ],
)
def test_formatting_config_validates_values(changes: dict) -> None:
    with pytest.raises(ConfigError):
        FormattingConfig(**changes)


def test_with_overrides_rejects_unknown_fields() -> None:
    with pytest.raises(ConfigError, match="Unknown configuration fields: colour"):
        FormattingConfig().with_overrides(colour="blue")


def test_with_overrides_keeps_the_original() -> None:
    base = FormattingConfig()
    changed = base.with_overrides(license_template=["one", "two"])
    assert changed.license_template == ("one", "two")
    assert base.license_template != changed.license_template
