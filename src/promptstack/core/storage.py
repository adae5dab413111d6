"""Storage capability used by the parser and the override engine.

The engine never touches the filesystem directly; it asks a :class:`Storage`
implementation. :class:`FileStorage` serves the local filesystem and runs the
blocking calls in worker threads so many checks can be awaited together.
"""
from __future__ import annotations

import asyncio
import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@runtime_checkable
class Storage(Protocol):
    """Read-only file access used during composition."""

    async def exists(self, path: PathLike) -> bool: ...

    async def read(self, path: PathLike, encoding: str = "utf-8") -> str: ...

    async def is_file(self, path: PathLike) -> bool: ...

    async def is_directory(self, path: PathLike) -> bool: ...

    async def list_files(self, path: PathLike, pattern: str = "*") -> List[str]: ...


class FileStorage:
    """:class:`Storage` over the local filesystem."""

    async def exists(self, path: PathLike) -> bool:
        found = await asyncio.to_thread(Path(path).exists)
        logger.debug("exists(%s) -> %s", path, found)
        return found

    async def read(self, path: PathLike, encoding: str = "utf-8") -> str:
        # Errors (missing file, permissions, bad encoding) propagate to the caller.
        return await asyncio.to_thread(Path(path).read_text, encoding=encoding)

    async def is_file(self, path: PathLike) -> bool:
        return await asyncio.to_thread(Path(path).is_file)

    async def is_directory(self, path: PathLike) -> bool:
        return await asyncio.to_thread(Path(path).is_dir)

    async def list_files(self, path: PathLike, pattern: str = "*") -> List[str]:
        """Return sorted names of regular files directly under ``path``."""

        def _scan() -> List[str]:
            base = Path(path)
            return sorted(
                p.name for p in base.iterdir() if p.is_file() and fnmatch(p.name, pattern)
            )

        return await asyncio.to_thread(_scan)


__all__ = ["FileStorage", "PathLike", "Storage"]
