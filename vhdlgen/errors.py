"""Error types raised while describing and generating VHDL modules."""

from __future__ import annotations

from typing import Sequence


class VhdlGenError(RuntimeError):
    """Base class for every failure surfaced by vhdlgen."""


class InvalidArgumentError(VhdlGenError, ValueError):
    """Raised when a construct is built with a missing or invalid field."""


class DuplicateNameError(InvalidArgumentError):
    """Raised when two children of the same parent share a name."""


class CyclicDependencyError(VhdlGenError):
    """Raised when declared types depend on each other in a loop."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__(
            "Cyclic dependency between declarations: " + " -> ".join(self.cycle)
        )


class TemplateCycleError(VhdlGenError):
    """Raised when an embeddable template ends up embedding itself."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        rendered = " -> ".join(f"<%{tag}%>" for tag in self.chain)
        super().__init__(f"Template references itself: {rendered}")


class OutputError(VhdlGenError):
    """Raised when the generated file cannot be written."""


__all__ = [
    "CyclicDependencyError",
    "DuplicateNameError",
    "InvalidArgumentError",
    "OutputError",
    "TemplateCycleError",
    "VhdlGenError",
]
