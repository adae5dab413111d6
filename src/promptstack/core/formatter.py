"""Render content trees as prompt text."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable, Mapping, Optional, Union

from .items import Entry, Section, Weighted

logger = logging.getLogger(__name__)

SECTION_SEPARATORS = ("tag", "markdown")


@dataclass(frozen=True)
class FormatOptions:
    """How sections are delimited in rendered output.

    Attributes:
        section_separator: ``"tag"`` wraps sections in ``<title>`` tags,
            ``"markdown"`` renders titles as headings
        section_indentation: Indent section bodies in tag mode
        section_title_prefix: Text placed before markdown headings' titles
        section_title_separator: Text between the prefix and the title
        section_depth: Heading depth of the outermost formatted level
    """

    section_separator: str = "tag"
    section_indentation: bool = False
    section_title_prefix: Optional[str] = None
    section_title_separator: Optional[str] = None
    section_depth: int = 0

    def __post_init__(self) -> None:
        if self.section_separator not in SECTION_SEPARATORS:
            raise ValueError(
                f"Unknown section separator '{self.section_separator}'. "
                f"Expected one of: {', '.join(SECTION_SEPARATORS)}"
            )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "FormatOptions":
        """Build options from a config mapping, ignoring unknown and ``None`` values."""
        known = {f.name for f in fields(cls)}
        aliases = {
            "sectionSeparator": "section_separator",
            "sectionIndentation": "section_indentation",
            "sectionTitlePrefix": "section_title_prefix",
            "sectionTitleSeparator": "section_title_separator",
            "sectionDepth": "section_depth",
        }
        kwargs = {}
        for key, value in (data or {}).items():
            name = aliases.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)


class Formatter:
    """Turn sections and items into text."""

    def __init__(self, options: Optional[FormatOptions] = None, **overrides: Any) -> None:
        base = options or FormatOptions()
        self.options = replace(base, **overrides) if overrides else base

    def format(self, item: Union[Entry, None], section_depth: Optional[int] = None) -> str:
        """Format a single item or section.

        Sections render one level deeper than ``section_depth``.
        """
        depth = self.options.section_depth if section_depth is None else section_depth
        if isinstance(item, Section):
            return self.format_section(item, depth + 1)
        if isinstance(item, Weighted):
            return item.text
        return ""

    def format_array(self, items: Iterable[Entry], section_depth: Optional[int] = None) -> str:
        depth = self.options.section_depth if section_depth is None else section_depth
        return "\n\n".join(self.format(item, depth) for item in items)

    def format_section(self, section: Optional[Section], section_depth: Optional[int] = None) -> str:
        if section is None:
            return ""
        depth = self.options.section_depth if section_depth is None else section_depth
        body = "\n\n".join(self.format(entry, depth) for entry in section.items)

        if self.options.section_separator == "tag":
            tag = section.title or "section"
            if self.options.section_indentation and body:
                body = "\n".join(f"  {line}" if line else line for line in body.split("\n"))
            return f"<{tag}>\n{body}\n</{tag}>"

        if not section.title:
            return body
        prefix = ""
        if self.options.section_title_prefix:
            parts = [self.options.section_title_prefix, self.options.section_title_separator]
            prefix = " ".join(p for p in parts if p) + " "
        heading = f"{'#' * max(depth, 1)} {prefix}{section.title}"
        return f"{heading}\n\n{body}" if body else heading


__all__ = ["FormatOptions", "Formatter", "SECTION_SEPARATORS"]
