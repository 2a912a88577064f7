"""Logger hierarchy for vhdlgen.

Library modules log through :func:`get_logger`; only the CLI installs
handlers. The console shows warnings when quiet, progress by default and
debug output when verbose. A log file, when given, always records the full
debug trace of a generation run.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "vhdlgen"
CONSOLE_FORMAT = "[vhdlgen] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the vhdlgen hierarchy.

    ``name`` may be a short module name (``"loader"``) or an already
    qualified one such as ``__name__`` inside the package.
    """
    if not name or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the console handler and the optional debug file sink."""
    level = console_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
        level = logging.DEBUG

    # The logger passes everything any handler wants; handlers filter further.
    logger.setLevel(level)
    return logger


__all__ = ["configure_logging", "console_level", "get_logger"]
