"""Error classes for prompt composition."""
from __future__ import annotations


class PromptStackError(Exception):
    """Base class for all promptstack errors."""
    pass


class OverridesDisabledError(PromptStackError):
    """Raised when a full override file exists but overrides are disabled."""

    DEFAULT_MESSAGE = (
        "Core directives are being overwritten by custom configuration, "
        "but overrides are not enabled.  Please enable --overrides to use this feature."
    )

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE)


class SectionIndexError(PromptStackError, IndexError):
    """Raised when a section mutation addresses an index outside its items."""
    pass


class ParseError(PromptStackError):
    """Raised when prompt source text cannot be parsed."""
    pass


class ConfigError(PromptStackError):
    """Raised when configuration cannot be loaded or fails validation."""
    pass


__all__ = [
    "PromptStackError",
    "OverridesDisabledError",
    "SectionIndexError",
    "ParseError",
    "ConfigError",
]
