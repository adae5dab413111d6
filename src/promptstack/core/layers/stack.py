from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerSpec:
    """A single configuration directory in the override stack."""

    index: int
    path: Path
    raw: str


@dataclass(frozen=True)
class LayerStack:
    """Resolved configuration directories, closest first."""

    repo_root: Path
    layers: tuple[LayerSpec, ...]  # closest → furthest

    def __len__(self) -> int:
        return len(self.layers)

    def layer_at(self, index: int) -> Optional[LayerSpec]:
        if 0 <= index < len(self.layers):
            return self.layers[index]
        return None

    def config_dirs(self) -> List[str]:
        """Return directory paths as strings, closest first."""
        return [str(layer.path) for layer in self.layers]


def _expand_layer_path(raw: str, *, repo_root: Path) -> Path:
    s = os.path.expandvars(str(raw)).strip()
    p = Path(s).expanduser()
    if not p.is_absolute():
        p = repo_root / p
    return p.resolve()


def resolve_config_dirs(repo_root: Path, raw_dirs: Iterable[str]) -> LayerStack:
    """Resolve configured directory strings into a :class:`LayerStack`.

    Empty entries are skipped. When the same directory appears more than
    once, only its closest occurrence is kept.
    """
    repo_root = Path(repo_root).resolve()
    layers: List[LayerSpec] = []
    seen = set()
    for raw in raw_dirs:
        if not isinstance(raw, str) or not raw.strip():
            continue
        path = _expand_layer_path(raw, repo_root=repo_root)
        if path in seen:
            logger.debug("Skipping duplicate layer %s (%s)", raw, path)
            continue
        seen.add(path)
        layers.append(LayerSpec(index=len(layers), path=path, raw=raw))

    return LayerStack(repo_root=repo_root, layers=tuple(layers))
