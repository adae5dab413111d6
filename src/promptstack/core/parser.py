"""Markdown to content-tree parser.

Converts markdown text into a :class:`Section` tree:

- ``#`` .. ``######`` headings open nested sections; a heading nests under the
  closest open heading of a lower level
- blank-line separated paragraphs become weighted items
- fenced code blocks stay a single item and never open sections
- text before the first heading belongs to the root section
"""
from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

from .errors import ParseError
from .items import Section, SectionOptions, apply_parameters
from .storage import FileStorage, PathLike, Storage

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.*?)[ \t]*#*[ \t]*$")
FENCE_PATTERN = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})")

OptionsLike = Union[SectionOptions, Mapping[str, Any], None]


@runtime_checkable
class SectionParser(Protocol):
    """Anything that can turn a file into a :class:`Section`."""

    async def parse_file(self, path: PathLike, options: OptionsLike = None) -> Section: ...


class Parser:
    """Parse markdown into :class:`Section` trees."""

    def __init__(self, storage: Optional[Storage] = None) -> None:
        self.storage: Storage = storage or FileStorage()

    def parse(self, text: str, options: OptionsLike = None) -> Section:
        """Parse markdown ``text`` into a section tree.

        Args:
            text: Markdown source
            options: Root title/weight, item weight and substitution parameters

        Returns:
            Root section holding the parsed content
        """
        opts = SectionOptions.coerce(options)
        root = Section.from_options(opts)

        # (heading level, section); the root sits at level 0
        stack: List[Tuple[int, Section]] = [(0, root)]
        paragraph: List[str] = []
        fence: Optional[str] = None

        def flush() -> None:
            if not paragraph:
                return
            block = "\n".join(paragraph).strip("\n")
            paragraph.clear()
            if block.strip():
                stack[-1][1].add(block.strip())

        for line in text.splitlines():
            fence_match = FENCE_PATTERN.match(line)
            if fence is not None:
                paragraph.append(line)
                if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                    fence = None
                continue
            if fence_match:
                fence = fence_match.group(1)
                paragraph.append(line)
                continue

            heading = HEADING_PATTERN.match(line)
            if heading:
                flush()
                level = len(heading.group(1))
                title = apply_parameters(heading.group(2), opts.parameters)
                while stack[-1][0] >= level:
                    stack.pop()
                child = Section(
                    title,
                    item_weight=opts.item_weight,
                    parameters=opts.parameters,
                )
                stack[-1][1].add(child)
                stack.append((level, child))
                continue

            if not line.strip():
                flush()
                continue
            paragraph.append(line)

        if fence is not None:
            logger.debug("Unterminated code fence; keeping it as a single item")
        flush()
        return root

    async def parse_file(self, path: PathLike, options: OptionsLike = None) -> Section:
        """Read ``path`` through storage and parse it.

        Raises:
            ParseError: If the file is not valid UTF-8 text
        """
        try:
            text = await self.storage.read(path)
        except UnicodeDecodeError as exc:
            raise ParseError(f"Cannot decode {path} as UTF-8: {exc}") from exc
        logger.debug("Parsing %s", path)
        return self.parse(text, options)


__all__ = ["Parser", "SectionParser"]
