"""Layered override resolution.

Every document ``name`` (e.g. ``persona.md``) can be customized by each
configuration directory in three ways:

- ``<dir>/persona.md``       full override, replaces the default tree
- ``<dir>/persona-pre.md``   fragment prepended to the tree
- ``<dir>/persona-post.md``  fragment appended to the tree

Directories are ordered closest (index 0, highest precedence) to furthest.
The closest full override wins outright. Pre fragments are collected
closest-first, post fragments furthest-first, so that after composition the
closest layer's fragments sit next to the original content at the start and
at the very end of the document respectively.
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Union

from .errors import OverridesDisabledError
from .formatter import Formatter
from .items import Section, SectionOptions
from .parser import OptionsLike, Parser, SectionParser
from .storage import FileStorage, Storage

if TYPE_CHECKING:
    from .config import OverrideConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIRS = ("./overrides",)
PRE_SUFFIX = "-pre"
POST_SUFFIX = "-post"

OVERRIDE_WARNING = "WARNING: Core directives are being overwritten by custom configuration at layer %d"


@dataclass(frozen=True)
class LayerFiles:
    """The three candidate files for one document in one layer."""

    index: int
    config_dir: str
    base: str
    pre: str
    post: str

    @classmethod
    def for_document(cls, index: int, config_dir: str, name: str) -> "LayerFiles":
        stem, ext = os.path.splitext(name)
        return cls(
            index=index,
            config_dir=config_dir,
            base=os.path.join(config_dir, name),
            pre=os.path.join(config_dir, f"{stem}{PRE_SUFFIX}{ext}"),
            post=os.path.join(config_dir, f"{stem}{POST_SUFFIX}{ext}"),
        )


@dataclass(frozen=True)
class LayerScan:
    """Existence of each candidate file in one layer."""

    files: LayerFiles
    has_base: bool
    has_pre: bool
    has_post: bool

    @property
    def index(self) -> int:
        return self.files.index


@dataclass
class OverrideResolution:
    """Outcome of resolving one document across all layers.

    Attributes:
        override: Replacement tree from the closest full-override file, if any
        prepends: Pre fragments, closest layer first
        appends: Post fragments, furthest layer first
        override_path: File that supplied ``override``
        prepend_paths: Files that supplied ``prepends``, same order
        append_paths: Files that supplied ``appends``, same order
    """

    override: Optional[Section] = None
    prepends: List[Section] = field(default_factory=list)
    appends: List[Section] = field(default_factory=list)
    override_path: Optional[str] = None
    prepend_paths: List[str] = field(default_factory=list)
    append_paths: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.override is None and not self.prepends and not self.appends


class OverrideEngine:
    """Resolve and apply layered overrides for prompt documents.

    The engine only holds configuration and collaborators; every call builds
    its own result, so concurrent calls share no mutable state.
    """

    def __init__(
        self,
        config_dirs: Iterable[Union[str, Path]] = DEFAULT_CONFIG_DIRS,
        *,
        overrides: bool = False,
        parameters: Optional[Mapping[str, Any]] = None,
        storage: Optional[Storage] = None,
        parser: Optional[SectionParser] = None,
        formatter: Optional[Formatter] = None,
    ) -> None:
        self.config_dirs: tuple[str, ...] = tuple(str(d) for d in config_dirs)
        self.overrides = bool(overrides)
        self.parameters: Mapping[str, Any] = dict(parameters or {})
        self.storage: Storage = storage or FileStorage()
        self.parser: SectionParser = parser or Parser(storage=self.storage)
        self.formatter = formatter or Formatter()

    @classmethod
    def from_config(
        cls,
        config: "OverrideConfig",
        *,
        storage: Optional[Storage] = None,
        parser: Optional[SectionParser] = None,
        formatter: Optional[Formatter] = None,
    ) -> "OverrideEngine":
        """Build an engine from the ``override`` config section."""
        return cls(
            config.layer_stack().config_dirs(),
            overrides=config.overrides,
            parameters=config.parameters,
            storage=storage,
            parser=parser,
            formatter=formatter,
        )

    def _load_options(self, section_options: OptionsLike) -> SectionOptions:
        return SectionOptions.coerce(section_options).with_parameters(self.parameters)

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    async def scan(self, name: str) -> List[LayerScan]:
        """Check every layer for all three variants of ``name``.

        All checks run concurrently; the result is only built once every
        check has completed.
        """
        layers = [
            LayerFiles.for_document(i, config_dir, name)
            for i, config_dir in enumerate(self.config_dirs)
        ]
        checks = await asyncio.gather(
            *(
                self.storage.exists(path)
                for layer in layers
                for path in (layer.base, layer.pre, layer.post)
            )
        )
        return [
            LayerScan(
                files=layer,
                has_base=bool(checks[3 * i]),
                has_pre=bool(checks[3 * i + 1]),
                has_post=bool(checks[3 * i + 2]),
            )
            for i, layer in enumerate(layers)
        ]

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    async def override(
        self,
        name: str,
        base_section: Optional[Section] = None,
        section_options: OptionsLike = None,
    ) -> OverrideResolution:
        """Resolve ``name`` across all layers without touching ``base_section``.

        Args:
            name: Document file name relative to each config dir (e.g. ``persona.md``)
            base_section: Default tree for the document; never mutated here
            section_options: Options forwarded to the parser

        Returns:
            Fresh :class:`OverrideResolution` for this call
        """
        options = self._load_options(section_options)
        scans = await self.scan(name)
        response = OverrideResolution()

        winner = next((scan for scan in scans if scan.has_base), None)
        if winner is not None:
            logger.debug("Found base file %s (layer %d)", winner.files.base, winner.index)
            logger.warning(OVERRIDE_WARNING, winner.index)
            response.override = await self.parser.parse_file(winner.files.base, options)
            response.override_path = winner.files.base

        for scan in scans:
            if scan.has_pre:
                logger.debug("Found pre file %s (layer %d)", scan.files.pre, scan.index)
                response.prepends.append(await self.parser.parse_file(scan.files.pre, options))
                response.prepend_paths.append(scan.files.pre)

        for scan in reversed(scans):
            if scan.has_post:
                logger.debug("Found post file %s (layer %d)", scan.files.post, scan.index)
                response.appends.append(await self.parser.parse_file(scan.files.post, options))
                response.append_paths.append(scan.files.post)

        return response

    async def customize(
        self,
        name: str,
        base_section: Section,
        section_options: OptionsLike = None,
    ) -> Section:
        """Apply every layer's customizations for ``name`` to ``base_section``.

        ``base_section`` is mutated in place unless a full override replaces
        it, in which case the override tree is returned and ``base_section``
        is left untouched.

        Raises:
            OverridesDisabledError: A full override exists but overrides are disabled
        """
        resolution = await self.override(name, base_section, section_options)

        final = base_section
        if resolution.override is not None:
            if not self.overrides:
                logger.error("ERROR: Core directives are being overwritten by custom configuration")
                raise OverridesDisabledError()
            logger.info("Override found, replacing content from file %s", resolution.override_path)
            final = resolution.override

        # Each prepend lands at index 0, so the closest fragment ends up next to the original content.
        for prepend, path in zip(resolution.prepends, resolution.prepend_paths):
            logger.debug("Prepend found, adding to content from file %s", path)
            final.prepend(prepend)

        for append, path in zip(resolution.appends, resolution.append_paths):
            logger.debug("Append found, adding to content from file %s", path)
            final.append(append)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Final section %s:\n\n%s\n\n", name, self.formatter.format(final))

        return final


__all__ = [
    "DEFAULT_CONFIG_DIRS",
    "LayerFiles",
    "LayerScan",
    "OVERRIDE_WARNING",
    "OverrideEngine",
    "OverrideResolution",
]
