"""Shared helpers for CLI commands."""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from promptstack.core.config import ConfigManager, FormatConfig, LoggingConfig, OverrideConfig
from promptstack.core.formatter import FormatOptions
from promptstack.core.layers import resolve_config_dirs
from promptstack.core.override import OverrideEngine
from promptstack.core.stdlib_logging import configure_logging

_VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}


def get_repo_root(args: argparse.Namespace) -> Path:
    raw = getattr(args, "repo_root", None)
    return Path(raw).resolve() if raw else Path.cwd().resolve()


def load_cli_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load merged config and set up logging from it and ``-v`` flags."""
    repo_root = get_repo_root(args)
    config = ConfigManager(repo_root).load_config()

    log_cfg = LoggingConfig(repo_root, config=config)
    verbosity = int(getattr(args, "verbose", 0) or 0)
    level = _VERBOSITY_LEVELS.get(min(verbosity, 2), log_cfg.level)
    configure_logging(level, log_path=log_cfg.file)
    logging.getLogger(__name__).debug("Loaded config for %s", repo_root)
    return config


def build_engine(args: argparse.Namespace, config: Dict[str, Any]) -> OverrideEngine:
    """Build an engine from config, letting CLI flags replace configured values."""
    repo_root = get_repo_root(args)
    override_cfg = OverrideConfig(repo_root, config=config)

    cli_dirs: Optional[List[str]] = getattr(args, "config_dirs", None)
    if cli_dirs:
        config_dirs = resolve_config_dirs(repo_root, cli_dirs).config_dirs()
    else:
        config_dirs = override_cfg.layer_stack().config_dirs()

    parameters = dict(override_cfg.parameters)
    parameters.update(parse_params(getattr(args, "params", None)))

    return OverrideEngine(
        config_dirs,
        overrides=override_cfg.overrides or bool(getattr(args, "overrides", False)),
        parameters=parameters,
    )


def format_options(args: argparse.Namespace, config: Dict[str, Any]) -> FormatOptions:
    options = FormatConfig(get_repo_root(args), config=config).options
    separator = getattr(args, "separator", None)
    if separator:
        options = replace(options, section_separator=separator)
    return options


def parse_params(raw: Optional[List[str]]) -> Dict[str, str]:
    """Parse ``key=value`` strings.

    Raises:
        ValueError: If an entry has no ``=`` or an empty key
    """
    params: Dict[str, str] = {}
    for item in raw or []:
        key, sep, value = str(item).partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid parameter '{item}'. Expected key=value.")
        params[key.strip()] = value
    return params


__all__ = ["build_engine", "format_options", "get_repo_root", "load_cli_config", "parse_params"]
