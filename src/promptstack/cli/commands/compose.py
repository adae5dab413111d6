from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
from pathlib import Path

from promptstack.cli._args import add_config_dir_flag, add_standard_flags
from promptstack.cli._output import OutputFormatter
from promptstack.cli._utils import build_engine, format_options, load_cli_config
from promptstack.core.formatter import Formatter
from promptstack.core.items import Section, SectionOptions
from promptstack.core.override import OverrideEngine

SUMMARY = "Compose a prompt document with all layer customizations"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)
    add_config_dir_flag(parser)
    parser.add_argument("file", help="Default markdown document")
    parser.add_argument(
        "--name",
        help="Document name looked up in each layer (default: the file's name)",
    )
    parser.add_argument("--title", help="Title of the root section")
    parser.add_argument(
        "--overrides",
        action="store_true",
        help="Allow full-override files to replace the default document",
    )
    parser.add_argument(
        "--separator",
        choices=["tag", "markdown"],
        help="Section separator style (default from config)",
    )
    parser.add_argument(
        "--param",
        dest="params",
        action="append",
        metavar="KEY=VALUE",
        help="Placeholder value (repeatable)",
    )


async def _compose(engine: OverrideEngine, path: Path, name: str, options: SectionOptions) -> Section:
    base = await engine.parser.parse_file(path, options)
    # Layer fragments nest under the root, so they do not inherit its title.
    return await engine.customize(name, base, replace(options, title=None))


def main(args: argparse.Namespace) -> int:
    config = load_cli_config(args)
    engine = build_engine(args, config)
    path = Path(args.file)
    name = args.name or path.name
    options = SectionOptions(title=args.title).with_parameters(engine.parameters)

    section = asyncio.run(_compose(engine, path, name, options))
    text = Formatter(format_options(args, config)).format(section)
    OutputFormatter(json_mode=args.json).success(
        {"name": name, "text": text, "section": section.to_dict()},
        text,
    )
    return 0
