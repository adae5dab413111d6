"""
Auto-discovery CLI dispatcher.

Every module in ``promptstack/cli/commands`` that does not start with an
underscore becomes a top-level command. A command module provides:

- SUMMARY: one-line help text
- register_args(parser): adds its arguments
- main(args) -> int: runs the command
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from promptstack.core.errors import PromptStackError

from ._output import OutputFormatter

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Import command modules under cli/commands.

    Returns:
        Dict mapping command name to its module metadata
    """
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue
        cmd_name = item.stem
        module = importlib.import_module(f"promptstack.cli.commands.{cmd_name}")
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return commands


def _get_version() -> str:
    from promptstack import __version__

    return __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all discovered commands."""
    parser = argparse.ArgumentParser(
        prog="promptstack",
        description="promptstack - layered prompt composition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )
    for cmd_name, cmd_info in discover_commands().items():
        cmd_parser = subparsers.add_parser(
            cmd_name.replace("_", "-"),
            help=cmd_info["summary"],
            description=cmd_info["summary"],
        )
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the ``promptstack`` console script.

    Returns:
        0 on success, 1 on composition/config errors, 2 on usage errors
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "_func", None)
    if func is None:
        parser.print_help()
        return 0

    output = OutputFormatter(json_mode=bool(getattr(args, "json", False)))
    try:
        return int(func(args) or 0)
    except PromptStackError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        output.error(exc, error_code=type(exc).__name__)
        return 1
    except (OSError, ValueError) as exc:
        output.error(exc, error_code=type(exc).__name__)
        return 2 if isinstance(exc, ValueError) else 1


if __name__ == "__main__":
    raise SystemExit(main())
