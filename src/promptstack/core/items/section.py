"""Section: the ordered content tree.

A section owns an ordered list of entries, each either a :class:`Weighted`
item or a nested :class:`Section`. Entry order is the rendering order and is
never rearranged or deduplicated by the section itself.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from ..errors import SectionIndexError
from .weighted import DEFAULT_WEIGHT, Weighted, create_weighted


@dataclass(frozen=True)
class SectionOptions:
    """Options applied when building a section.

    Attributes:
        title: Title of the root section
        weight: Weight of the root section
        item_weight: Weight given to items lifted from bare strings
        parameters: Values substituted into ``{{name}}`` placeholders
    """

    title: Optional[str] = None
    weight: float = DEFAULT_WEIGHT
    item_weight: float = DEFAULT_WEIGHT
    parameters: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: Union["SectionOptions", Mapping[str, Any], None]) -> "SectionOptions":
        """Build options from ``None``, a mapping, or an existing instance."""
        if value is None:
            return cls()
        if isinstance(value, SectionOptions):
            return value
        return cls(
            title=value.get("title"),
            weight=_as_weight(value.get("weight")),
            item_weight=_as_weight(value.get("item_weight", value.get("itemWeight"))),
            parameters=dict(value.get("parameters") or {}),
        )

    def with_parameters(self, defaults: Mapping[str, Any]) -> "SectionOptions":
        """Return a copy whose parameters are ``defaults`` overlaid by our own."""
        merged = dict(defaults or {})
        merged.update(self.parameters or {})
        return replace(self, parameters=merged)


def _as_weight(raw: Any) -> float:
    # 0 is a valid weight; only a missing value falls back to the default.
    return DEFAULT_WEIGHT if raw is None else float(raw)


Entry = Union[Weighted, "Section"]


class Section:
    """Ordered, mutable container of weighted items and nested sections."""

    def __init__(
        self,
        title: Optional[str] = None,
        *,
        weight: float = DEFAULT_WEIGHT,
        item_weight: float = DEFAULT_WEIGHT,
        parameters: Optional[Mapping[str, Any]] = None,
        items: Optional[List[Entry]] = None,
    ) -> None:
        self.title = title
        self.weight = float(weight)
        self.item_weight = float(item_weight)
        self.parameters: Dict[str, Any] = dict(parameters or {})
        self.items: List[Entry] = []
        for entry in items or []:
            self.add(entry)

    @classmethod
    def from_options(cls, options: Union[SectionOptions, Mapping[str, Any], None] = None) -> "Section":
        opts = SectionOptions.coerce(options)
        return cls(
            opts.title,
            weight=opts.weight,
            item_weight=opts.item_weight,
            parameters=opts.parameters,
        )

    # ------------------------------------------------------------------
    # Entry coercion
    # ------------------------------------------------------------------

    def _coerce(self, entry: Union[str, Entry]) -> Entry:
        if isinstance(entry, (Weighted, Section)):
            return entry
        if isinstance(entry, str):
            return create_weighted(entry, weight=self.item_weight, parameters=self.parameters)
        raise TypeError(
            f"Section entries must be str, Weighted or Section, not {type(entry).__name__}"
        )

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise SectionIndexError(
                f"Section index {index} out of range (section has {len(self.items)} items)"
            )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, entry: Union[str, Entry]) -> "Section":
        """Append an entry to the end of the section."""
        self.items.append(self._coerce(entry))
        return self

    def append(self, entry: Union[str, Entry]) -> "Section":
        """Append an entry; a section argument is nested, not flattened."""
        return self.add(entry)

    def prepend(self, entry: Union[str, Entry]) -> "Section":
        """Insert an entry before all existing entries."""
        self.items.insert(0, self._coerce(entry))
        return self

    def insert(self, index: int, entry: Union[str, Entry]) -> "Section":
        """Insert an entry at ``index``, clamped to ``[0, len(items)]``."""
        position = max(0, min(int(index), len(self.items)))
        self.items.insert(position, self._coerce(entry))
        return self

    def replace(self, index: int, entry: Union[str, Entry]) -> "Section":
        """Replace the entry at ``index``.

        Raises:
            SectionIndexError: If ``index`` does not address an existing entry
        """
        self._check_index(index)
        self.items[index] = self._coerce(entry)
        return self

    def remove(self, index: int) -> Entry:
        """Remove and return the entry at ``index``.

        Raises:
            SectionIndexError: If ``index`` does not address an existing entry
        """
        self._check_index(index)
        return self.items.pop(index)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Section):
            return NotImplemented
        return (
            self.title == other.title
            and self.weight == other.weight
            and self.items == other.items
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Section(title={self.title!r}, weight={self.weight!r}, items={len(self.items)})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the tree into plain dicts and lists."""
        data: Dict[str, Any] = {
            "title": self.title,
            "weight": self.weight,
            "items": [entry.to_dict() for entry in self.items],
        }
        if self.item_weight != DEFAULT_WEIGHT:
            data["item_weight"] = self.item_weight
        if self.parameters:
            data["parameters"] = dict(self.parameters)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Section":
        """Rebuild a tree from :meth:`to_dict` output.

        Entries carrying an ``items`` list are sections; all others are items.
        """
        section = cls(
            data.get("title"),
            weight=float(data.get("weight", DEFAULT_WEIGHT)),
            item_weight=_as_weight(data.get("item_weight")),
            parameters=dict(data.get("parameters") or {}),
        )
        for raw in data.get("items") or []:
            if isinstance(raw, Mapping) and isinstance(raw.get("items"), list):
                section.items.append(cls.from_dict(raw))
            elif isinstance(raw, Mapping):
                section.items.append(Weighted.from_dict(raw))
            else:
                section.add(str(raw))
        return section


__all__ = ["Entry", "Section", "SectionOptions"]
