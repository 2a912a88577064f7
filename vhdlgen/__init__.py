"""vhdlgen turns module descriptions into documented VHDL source files."""

from ._version import __version__
from .assembler import DocumentAssembler, generate
from .config import FormattingConfig, load_config
from .errors import (
    CyclicDependencyError,
    DuplicateNameError,
    InvalidArgumentError,
    OutputError,
    TemplateCycleError,
    VhdlGenError,
)
from .loader import load_module

__all__ = [
    "CyclicDependencyError",
    "DocumentAssembler",
    "DuplicateNameError",
    "FormattingConfig",
    "InvalidArgumentError",
    "OutputError",
    "TemplateCycleError",
    "VhdlGenError",
    "__version__",
    "generate",
    "load_config",
    "load_module",
]
