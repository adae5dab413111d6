"""
promptstack CLI package.

Commands are auto-discovered from ``cli/commands``.

Framework utilities for building commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Config, logging and engine setup shared by commands
"""
from ._args import (
    add_config_dir_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
)
from ._output import OutputFormatter
from ._utils import build_engine, get_repo_root, load_cli_config, parse_params

__all__ = [
    "OutputFormatter",
    "add_config_dir_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_verbose_flag",
    "build_engine",
    "get_repo_root",
    "load_cli_config",
    "parse_params",
]
