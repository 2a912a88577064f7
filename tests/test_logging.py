"""Logger hierarchy and handler configuration tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vhdlgen.logging import configure_logging, console_level, get_logger


@pytest.mark.parametrize("name", ["loader", "vhdlgen.loader"])
def test_get_logger_places_names_under_the_package(name: str) -> None:
    assert get_logger(name).name == "vhdlgen.loader"


def test_get_logger_without_name_is_the_root_of_the_hierarchy() -> None:
    assert get_logger().name == "vhdlgen"
    assert get_logger("vhdlgen") is get_logger()


@pytest.mark.parametrize(
    "verbose, quiet, expected",
    [
        (False, False, logging.INFO),
        (True, False, logging.DEBUG),
        (False, True, logging.WARNING),
        (True, True, logging.DEBUG),
    ],
)
def test_console_level(verbose: bool, quiet: bool, expected: int) -> None:
    assert console_level(verbose=verbose, quiet=quiet) == expected


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(quiet=True)
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.WARNING
    assert logger.level == logging.WARNING
    assert logger.propagate is False


def test_log_file_records_debug_even_when_console_is_quiet(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    logger = configure_logging(quiet=True, log_file=log_file)

    get_logger("ordering").debug("Ordered %d declarations", 3)
    get_logger("cli").info("hidden from the console")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG vhdlgen.ordering: Ordered 3 declarations" in text
    assert "INFO vhdlgen.cli: hidden from the console" in text
    assert logger.level == logging.DEBUG
    assert [handler.level for handler in logger.handlers] == [logging.WARNING, logging.DEBUG]
