"""Test helpers: in-memory storage and tree builders."""
from __future__ import annotations

from helpers.storage import MemoryStorage
from helpers.trees import item_texts, titles

__all__ = ["MemoryStorage", "item_texts", "titles"]
