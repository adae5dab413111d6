"""Typed accessors over sections of the merged configuration."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from promptstack.core.formatter import FormatOptions
from promptstack.core.layers import LayerStack, resolve_config_dirs

from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Base class for configuration section accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

        cfg = MyConfig(repo_root=Path("/path/to/project"))
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize domain config.

        Args:
            repo_root: Repository root; relative paths resolve against it (default: cwd)
            config: Already merged config; loaded through ConfigManager when omitted
        """
        self.repo_root = Path(repo_root or Path.cwd()).resolve()
        self._config: Mapping[str, Any] = (
            config if config is not None else ConfigManager(self.repo_root).load_config()
        )

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        return dict(self._config.get(self._config_section(), {}) or {})


class OverrideConfig(BaseDomainConfig):
    """The ``override`` section: layer directories and override policy."""

    def _config_section(self) -> str:
        return "override"

    @cached_property
    def config_dirs(self) -> List[str]:
        return [str(d) for d in self.section.get("configDirs", []) or []]

    @cached_property
    def overrides(self) -> bool:
        return bool(self.section.get("overrides", False))

    @cached_property
    def parameters(self) -> Dict[str, Any]:
        return dict(self.section.get("parameters", {}) or {})

    def layer_stack(self) -> LayerStack:
        return resolve_config_dirs(self.repo_root, self.config_dirs)


class FormatConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "format"

    @cached_property
    def options(self) -> FormatOptions:
        return FormatOptions.from_mapping(self.section)


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level", "WARNING")).upper()

    @cached_property
    def file(self) -> Optional[Path]:
        raw = self.section.get("file")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        return path if path.is_absolute() else self.repo_root / path


__all__ = ["BaseDomainConfig", "FormatConfig", "LoggingConfig", "OverrideConfig"]
