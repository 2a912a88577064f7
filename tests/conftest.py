from __future__ import annotations

import logging
from datetime import datetime

import pytest

from vhdlgen.assembler import DocumentAssembler
from vhdlgen.config import FormattingConfig


@pytest.fixture
def config() -> FormattingConfig:
    """Space-indented configuration with a fixed identity."""
    return FormattingConfig(
        developer="Jane Doe",
        company="Acme",
        use_tabs=False,
        tab_size=2,
        max_line_width=80,
    )


@pytest.fixture
def assembler(config: FormattingConfig) -> DocumentAssembler:
    return DocumentAssembler(config)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 4, 5, 6, 7)


@pytest.fixture(autouse=True)
def reset_vhdlgen_logger():
    """Undo handlers installed by the CLI so caplog keeps seeing records."""
    logger = logging.getLogger("vhdlgen")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
