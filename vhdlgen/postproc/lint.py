"""Whitespace clean-up for generated VHDL files."""

from __future__ import annotations

from typing import List


class OutputLinter:
    """Normalises line endings and trailing whitespace.

    Blank lines inside the file are kept as given, since they may belong to
    user supplied bodies. Only the blank lines before the first and after the
    last line of text are removed.
    """

    def lint(self, text: str) -> str:
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = [line.rstrip() for line in normalized.split("\n")]

        start = 0
        while start < len(cleaned) and not cleaned[start]:
            start += 1
        while len(cleaned) > start and not cleaned[-1]:
            cleaned.pop()

        return "\n".join(cleaned[start:]) + "\n"


__all__ = ["OutputLinter"]
