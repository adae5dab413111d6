"""Core prompt composition.

Public API:
- Section / Weighted: the content tree
- Parser / Formatter: markdown in, prompt text out
- OverrideEngine: layered override resolution and application
- Storage / FileStorage: file access used by the engine
"""
from __future__ import annotations

from .errors import (
    ConfigError,
    OverridesDisabledError,
    ParseError,
    PromptStackError,
    SectionIndexError,
)
from .formatter import FormatOptions, Formatter
from .items import Section, SectionOptions, Weighted, create_weighted
from .override import LayerFiles, LayerScan, OverrideEngine, OverrideResolution
from .parser import Parser, SectionParser
from .storage import FileStorage, Storage

__all__ = [
    # Items
    "Section",
    "SectionOptions",
    "Weighted",
    "create_weighted",
    # Parsing / formatting
    "FormatOptions",
    "Formatter",
    "Parser",
    "SectionParser",
    # Overrides
    "LayerFiles",
    "LayerScan",
    "OverrideEngine",
    "OverrideResolution",
    # Storage
    "FileStorage",
    "Storage",
    # Errors
    "ConfigError",
    "OverridesDisabledError",
    "ParseError",
    "PromptStackError",
    "SectionIndexError",
]
