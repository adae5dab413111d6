"""Content tree items: weighted text and nested sections."""
from __future__ import annotations

from .section import Entry, Section, SectionOptions
from .weighted import (
    DEFAULT_WEIGHT,
    Weighted,
    apply_parameters,
    create_weighted,
)

__all__ = [
    "DEFAULT_WEIGHT",
    "Entry",
    "Section",
    "SectionOptions",
    "Weighted",
    "apply_parameters",
    "create_weighted",
]
