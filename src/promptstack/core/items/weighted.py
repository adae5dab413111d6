"""Weighted text items.

A weighted item is the leaf of a content tree: opaque text plus a relevance
weight. Named parameters are substituted into ``{{name}}`` placeholders when
the item is created through :func:`create_weighted`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

DEFAULT_WEIGHT = 1.0

# {{name}} with optional inner whitespace; names follow identifier rules plus dots/dashes.
PARAMETER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][\w.\-]*)\s*\}\}")


@dataclass(frozen=True)
class Weighted:
    """Immutable text item with a relevance weight."""

    text: str
    weight: float = DEFAULT_WEIGHT
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the parameter mapping so the item cannot be changed through it.
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters or {})))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"text": self.text, "weight": self.weight}
        if self.parameters:
            data["parameters"] = dict(self.parameters)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Weighted":
        return cls(
            text=str(data.get("text", "")),
            weight=float(data.get("weight", DEFAULT_WEIGHT)),
            parameters=dict(data.get("parameters") or {}),
        )


def apply_parameters(text: str, parameters: Optional[Mapping[str, Any]]) -> str:
    """Substitute ``{{name}}`` placeholders in ``text``.

    Placeholders without a matching parameter are left as-is.

    Example:
        >>> apply_parameters("Hello {{who}}", {"who": "world"})
        'Hello world'
    """
    if not parameters or "{{" not in text:
        return text

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in parameters:
            return str(parameters[key])
        return match.group(0)

    return PARAMETER_PATTERN.sub(_sub, text)


def create_weighted(
    text: str,
    *,
    weight: Optional[float] = None,
    parameters: Optional[Mapping[str, Any]] = None,
) -> Weighted:
    """Create a :class:`Weighted` with parameters substituted into its text."""
    params = dict(parameters or {})
    return Weighted(
        text=apply_parameters(text, params),
        weight=DEFAULT_WEIGHT if weight is None else float(weight),
        parameters=params,
    )


__all__ = [
    "DEFAULT_WEIGHT",
    "PARAMETER_PATTERN",
    "Weighted",
    "apply_parameters",
    "create_weighted",
]
