"""Post-processing applied to generated output."""

from .lint import OutputLinter

__all__ = ["OutputLinter"]
