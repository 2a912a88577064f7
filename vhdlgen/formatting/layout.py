"""Column-aware wrapping, indentation and comment layout."""

from __future__ import annotations

from typing import List, Mapping, Optional, Protocol, Sequence

from ..config import FormattingConfig
from ..templating.constants import FLOWER_FILL

COMMENT = "--"


class Documented(Protocol):
    """Anything that can be documented with a ``name - description`` line."""

    name: str
    description: str
    remarks: Optional[str]


class LineFormatter:
    """Lays out comment and code lines within the configured width.

    Widths are measured from column zero with tabs expanded to ``tab_size``
    columns, so an indentation level always costs ``tab_size`` columns no
    matter whether tabs or spaces are emitted.
    """

    def __init__(self, config: FormattingConfig | None = None) -> None:
        self.config = config or FormattingConfig()

    @property
    def width(self) -> int:
        return self.config.max_line_width

    def indent(self, level: int) -> str:
        level = max(level, 0)
        if self.config.use_tabs:
            return "\t" * level
        return " " * (self.config.tab_size * level)

    def measure(self, text: str) -> int:
        return len(text.expandtabs(self.config.tab_size))

    def wrap_line(
        self,
        text: str,
        indent_prefix: str = "",
        max_width: int | None = None,
        *,
        continuation_prefix: str | None = None,
        fallback_prefix: str | None = None,
    ) -> List[str]:
        """Greedily pack the words of ``text`` into lines no wider than ``max_width``.

        Every line starts with ``indent_prefix`` (later lines with
        ``continuation_prefix`` when given). When the continuation prefix is so
        wide that the longest word would not fit after it, later lines use
        ``fallback_prefix`` instead. A word that cannot fit even on an empty
        line is emitted alone rather than split.
        """
        width = self.width if max_width is None else max_width
        words = text.split()
        follow = indent_prefix if continuation_prefix is None else continuation_prefix
        if fallback_prefix is not None and words:
            longest = max(self.measure(word) for word in words)
            if self.measure(follow) + longest > width:
                follow = fallback_prefix
        return self._pack(words, indent_prefix, follow, width)

    def flower_line(self, level: int = 0) -> Optional[str]:
        """Border line for documentation blocks, or ``None`` without a flower character."""
        char = self.config.flower_box_char
        if char is None:
            return None
        prefix = f"{self.indent(level)}{COMMENT}"
        return prefix + char * max(self.width - self.measure(prefix), 0)

    def fill_flowers(self, line: str, level: int = 0) -> str:
        """Replace ``<%flowerfill%>`` markers so the line, indented by ``level``, reaches the full width."""
        count = line.count(FLOWER_FILL)
        if not count:
            return line
        base = line.replace(FLOWER_FILL, "")
        char = self.config.flower_box_char
        remaining = self.width - self.measure(self.indent(level) + base)
        if char is None or remaining <= 0:
            return base
        share, extra = divmod(remaining, count)
        parts = line.split(FLOWER_FILL)
        filled = parts[0]
        for index, part in enumerate(parts[1:], start=1):
            fill = share + (extra if index == count else 0)
            filled += char * fill + part
        return filled

    def comment_text(self, line: str, level: int = 0) -> List[str]:
        """Lay out one boilerplate line, keeping the comment marker when it wraps."""
        text = self.fill_flowers(line, level).rstrip()
        prefix = self.indent(level)
        if not text:
            return [""]
        if self.measure(prefix + text) <= self.width:
            return [prefix + text]
        if text.startswith(COMMENT):
            body = text[len(COMMENT):]
            return self.wrap_line(body, f"{prefix}{COMMENT} ")
        return self.wrap_line(text, prefix)

    def format_comment(
        self,
        item: Documented,
        level: int = 0,
        entries: Mapping[str, Sequence[str]] | None = None,
    ) -> List[str]:
        """Documentation block for ``item``: summary, keyed entries and remarks."""
        indent = self.indent(level)
        head = f"{indent}{COMMENT} "
        lines: List[str] = []

        flower = self.flower_line(level)
        if flower:
            lines.append(flower)

        lines.extend(self.doc_line(item, level))

        for key, values in (entries or {}).items():
            if not values:
                continue
            lines.append(f"{indent}{COMMENT}")
            lines.append(f"{head}{key}:")
            for value in values:
                lines.extend(
                    self.wrap_line(value, f"{head}  ", continuation_prefix=f"{head}    ")
                )

        if item.remarks and item.remarks.strip():
            lines.append(f"{indent}{COMMENT}")
            for paragraph in item.remarks.strip().splitlines():
                wrapped = self.wrap_line(paragraph, head)
                lines.extend(wrapped or [f"{indent}{COMMENT}"])

        if flower:
            lines.append(flower)
        return lines

    def doc_line(self, item: Documented, level: int = 0) -> List[str]:
        """Single ``-- name - description`` line (wrapped) without a flower box."""
        head = f"{self.indent(level)}{COMMENT} "
        return self.wrap_line(
            f"{item.name} - {item.description}",
            head,
            continuation_prefix=head + " " * (len(item.name) + 3),
            fallback_prefix=head,
        )

    def code_lines(self, text: str, level: int = 0) -> List[str]:
        """Indent a code line, breaking it outside string literals when too wide."""
        stripped = text.rstrip()
        if not stripped.strip():
            return [""]
        indent = self.indent(level)
        line = indent + stripped
        if self.measure(line) <= self.width:
            return [line]

        content = stripped.lstrip()
        lead = indent + stripped[: len(stripped) - len(content)]
        code, comment = _split_comment(content)
        lines = self._pack(_code_tokens(code), lead, lead + self.indent(1)) if code else []
        if comment:
            if lines and self.measure(f"{lines[-1]} {comment}") <= self.width:
                lines[-1] = f"{lines[-1]} {comment}"
            else:
                prefix = lead if not lines else lead + self.indent(1)
                lines.extend(self.wrap_line(comment[len(COMMENT):], f"{prefix}{COMMENT} "))
        return lines

    def _pack(self, tokens: Sequence[str], first: str, follow: str, width: int | None = None) -> List[str]:
        width = self.width if width is None else width
        lines: List[str] = []
        current: Optional[str] = None
        for token in tokens:
            if current is None:
                current = f"{first}{token}"
                continue
            candidate = f"{current} {token}"
            if self.measure(candidate) <= width:
                current = candidate
            else:
                lines.append(current)
                current = f"{follow}{token}"
        if current is not None:
            lines.append(current)
        return lines


def _split_comment(code: str) -> tuple[str, str]:
    """Separate a trailing ``--`` comment that is not inside a string literal."""
    in_string = False
    for index, char in enumerate(code):
        if char == '"':
            in_string = not in_string
        elif not in_string and code.startswith(COMMENT, index):
            return code[:index].rstrip(), code[index:].strip()
    return code, ""


def _code_tokens(code: str) -> List[str]:
    """Split code on whitespace, keeping string literals whole."""
    tokens: List[str] = []
    current: List[str] = []
    in_string = False
    for char in code:
        if char == '"':
            in_string = not in_string
        if char.isspace() and not in_string:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


__all__ = ["COMMENT", "Documented", "LineFormatter"]
