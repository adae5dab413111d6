"""Configuration loading and typed section accessors."""
from __future__ import annotations

from .domains import BaseDomainConfig, FormatConfig, LoggingConfig, OverrideConfig
from .manager import ConfigManager, ENV_PREFIX, PROJECT_CONFIG_DIR, load_config

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "ENV_PREFIX",
    "FormatConfig",
    "LoggingConfig",
    "OverrideConfig",
    "PROJECT_CONFIG_DIR",
    "load_config",
]
