"""Expansion of ``<%tag%>`` placeholders in boilerplate templates."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import FormattingConfig
from ..errors import TemplateCycleError
from .constants import DATE_FORMAT, EMBEDDED_TAGS, FLOWER_FILL_TAG, TIME_FORMAT


@dataclass(frozen=True)
class TemplateContext:
    """Tag values visible at one emission point.

    Lookups prefer item-specific tags, then global tags, then generic tags.
    """

    generic_tags: Mapping[str, str] = field(default_factory=dict)
    global_tags: Mapping[str, str] = field(default_factory=dict)
    item_tags: Mapping[str, str] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[str]:
        for scope in (self.item_tags, self.global_tags, self.generic_tags):
            if name in scope:
                return scope[name]
        return None

    def with_items(self, **tags: Optional[str]) -> "TemplateContext":
        """Return a context with additional item-specific tags."""
        merged = dict(self.item_tags)
        merged.update({key: "" if value is None else str(value) for key, value in tags.items()})
        return replace(self, item_tags=merged)


def generic_tags_for(moment: datetime) -> Dict[str, str]:
    """Date and time tags derived from a single sampled instant."""
    date = moment.strftime(DATE_FORMAT)
    time = moment.strftime(TIME_FORMAT)
    return {
        "year": f"{moment.year:04d}",
        "date": date,
        "time": time,
        "datetime": f"{date} {time}",
    }


def global_tags_for(config: FormattingConfig) -> Dict[str, str]:
    """Process-wide identity tags taken from the configuration."""
    return {
        "developer": config.developer,
        "company": config.company,
        "appname": config.app_name,
        "appversion": config.app_version,
        "libraryname": config.library_name,
        "libraryversion": config.library_version,
    }


class TemplateEngine:
    """Resolves template tags against a :class:`TemplateContext`.

    ``<%copyright%>`` and ``<%license%>`` pull in the configured copyright and
    license templates. The chain of embedded templates being expanded is
    tracked so a template that reaches itself again raises
    :class:`TemplateCycleError` instead of looping. Tags nobody defines are
    left untouched; ``<%flowerfill%>`` is always left for the line formatter.
    """

    TAG_PATTERN = re.compile(r"<%([A-Za-z_][A-Za-z0-9_]*)%>")

    def __init__(self, config: FormattingConfig | None = None) -> None:
        self.config = config or FormattingConfig()

    def build_context(self, *, now: datetime | None = None, **item_tags: Optional[str]) -> TemplateContext:
        """Sample the clock once and build the context for a generation run."""
        moment = now or datetime.now()
        context = TemplateContext(
            generic_tags=generic_tags_for(moment),
            global_tags=global_tags_for(self.config),
        )
        return context.with_items(**item_tags) if item_tags else context

    def expand(self, template: Optional[str], context: TemplateContext) -> str:
        """Return ``template`` with every known tag replaced."""
        return self._expand(template, context, ())

    def expand_lines(self, lines: Optional[Iterable[str]], context: TemplateContext) -> List[str]:
        """Expand a multi-line template; embedded blocks become separate lines."""
        return _split(self._expand(line, context, ()) for line in lines or ())

    def expand_copyright(self, context: TemplateContext) -> List[str]:
        """Expand the configured copyright template, guarding against self reference."""
        if not self.config.copyright_template:
            return []
        return self._embedded("copyright", context, ("copyright",)).split("\n")

    def expand_license(self, context: TemplateContext) -> List[str]:
        """Expand the configured license template, guarding against self reference."""
        if not self.config.license_template:
            return []
        return self._embedded("license", context, ("license",)).split("\n")

    def _expand(self, template: Optional[str], context: TemplateContext, chain: Tuple[str, ...]) -> str:
        if not template:
            return ""

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name == FLOWER_FILL_TAG:
                return match.group(0)
            if name in EMBEDDED_TAGS:
                if name in chain:
                    raise TemplateCycleError(chain + (name,))
                return self._embedded(name, context, chain + (name,))
            value = context.lookup(name)
            return match.group(0) if value is None else value

        return self.TAG_PATTERN.sub(substitute, template)

    def _embedded(self, name: str, context: TemplateContext, chain: Tuple[str, ...]) -> str:
        if name == "copyright":
            return self._expand(self.config.copyright_template, context, chain)
        lines = [self._expand(line, context, chain) for line in self.config.license_template]
        return "\n".join(lines)


def _split(values: Iterable[str]) -> List[str]:
    lines: List[str] = []
    for value in values:
        lines.extend(value.split("\n"))
    return lines


__all__ = ["TemplateContext", "TemplateEngine", "generic_tags_for", "global_tags_for"]
