from __future__ import annotations

import argparse
import asyncio
from typing import Any, Dict, List

from promptstack.cli._args import add_config_dir_flag, add_standard_flags
from promptstack.cli._output import OutputFormatter
from promptstack.cli._utils import build_engine, load_cli_config
from promptstack.core.override import LayerScan

SUMMARY = "Explain which layers customize a document"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)
    add_config_dir_flag(parser)
    parser.add_argument("name", help="Document file name (e.g. persona.md)")


def _payload(name: str, scans: List[LayerScan]) -> Dict[str, Any]:
    winner = next((s for s in scans if s.has_base), None)
    return {
        "name": name,
        "layers": [
            {
                "index": s.index,
                "dir": s.files.config_dir,
                "override": s.files.base if s.has_base else None,
                "pre": s.files.pre if s.has_pre else None,
                "post": s.files.post if s.has_post else None,
            }
            for s in scans
        ],
        "override": winner.files.base if winner else None,
        "prepends": [s.files.pre for s in scans if s.has_pre],
        "appends": [s.files.post for s in reversed(scans) if s.has_post],
    }


def _describe(payload: Dict[str, Any]) -> str:
    lines = [f"{payload['name']}:"]
    for layer in payload["layers"]:
        found = [kind for kind in ("override", "pre", "post") if layer[kind]]
        lines.append(f"  [{layer['index']}] {layer['dir']}: {', '.join(found) or '-'}")
    lines.append(f"override: {payload['override'] or 'none'}")
    lines.append("prepends (closest first): " + (", ".join(payload["prepends"]) or "none"))
    lines.append("appends (furthest first): " + (", ".join(payload["appends"]) or "none"))
    return "\n".join(lines)


def main(args: argparse.Namespace) -> int:
    config = load_cli_config(args)
    engine = build_engine(args, config)
    scans = asyncio.run(engine.scan(args.name))
    payload = _payload(args.name, scans)
    OutputFormatter(json_mode=args.json).success(payload, _describe(payload))
    return 0
