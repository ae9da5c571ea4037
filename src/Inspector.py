#!/usr/bin/env python3
"""
Inspector.py — command-line front end

- Subcommands: symbols, hoverable, filemap, definition, complete
- Language inferred from the file extension unless --language is given
- Rows and chunk ranges on the command line are 1-based and inclusive
- Prints one JSON document to stdout; errors become {"error": ...} with exit code 1
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from CodeChunk import CodeChunkMiddle
from intelligence_config import IntelligenceConfig, load_config
from language_registry import available_languages, language_for_path
from LineMapper import LineMapper
from render import OutputBuffer, decode_bytes
from TreeSitterFile import TreeSitterFile
from treesitter_errors import TreeSitterFileError, UnsupportedLanguage

logger = logging.getLogger("inspector")


def _parse_chunk_spec(spec: str) -> tuple[int, int]:
    """Parse 'START:END' (1-based, inclusive) into a 0-based line pair."""
    head, sep, tail = spec.partition(":")
    try:
        start = int(head)
        end = int(tail) if sep else start
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid chunk '{spec}', expected START:END") from exc
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(f"invalid chunk '{spec}', expected 1 <= START <= END")
    return start - 1, end - 1


def _build_chunks(path: str, contents: bytes, specs: Sequence[tuple[int, int]]) -> List[CodeChunkMiddle]:
    mapper = LineMapper(contents)
    chunks: List[CodeChunkMiddle] = []
    for alias, (start, end) in enumerate(specs):
        span = mapper.rows_span(start, end)
        text = decode_bytes(contents, *span) if span else ""
        chunks.append(CodeChunkMiddle(path=path, text=text, alias=alias, start_line=start, end_line=end))
    return chunks


def _symbols_payload(ts_file: TreeSitterFile, contents: bytes) -> List[Dict[str, Any]]:
    out = []
    for symbol in ts_file.scope_graph().symbols():
        rng = symbol.range
        out.append(
            {
                "kind": symbol.kind,
                "line": rng.start.line + 1,
                "column": rng.start.column + 1,
                "name": decode_bytes(contents, rng.start.byte, rng.end.byte),
            }
        )
    return out


def run(args: argparse.Namespace, config: IntelligenceConfig) -> Dict[str, Any]:
    """Execute one subcommand and return its JSON-ready payload."""
    path = args.file
    language = args.language or language_for_path(path)
    if not language:
        logger.error("Cannot infer language for %s; known: %s", path, ", ".join(available_languages()))
        raise UnsupportedLanguage(Path(path).suffix.lstrip(".") or path)
    contents = Path(path).read_bytes()
    logger.info("Inspecting %s as %s (%d bytes)", path, language, len(contents))
    ts_file = TreeSitterFile.try_build(contents, language, config)

    payload: Dict[str, Any] = {"path": path, "language": language, "command": args.command}
    if args.command == "symbols":
        payload["symbols"] = _symbols_payload(ts_file, contents)
    elif args.command == "hoverable":
        payload["ranges"] = [r.to_dict() for r in ts_file.hoverable_ranges()]
    elif args.command == "filemap":
        payload["filemap"] = ts_file.filemap()
    elif args.command == "definition":
        skeleton, definitions = ts_file.get_definition(args.rows, path)
        payload["skeleton"] = skeleton
        payload["definitions"] = [d.to_dict() for d in definitions]
    elif args.command == "complete":
        result = OutputBuffer()
        ts_file.get_completed_body_by_chunks(_build_chunks(path, contents, args.chunk), result)
        payload["completed"] = result.getvalue()
    return payload


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render source-code intelligence artifacts as JSON.")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", help="Source file to analyze")
    common.add_argument("--language", help="Language id (default: inferred from extension)")
    common.add_argument("--plain", action="store_true", help="Render without line numbers")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("symbols", parents=[common], help="List scope-graph symbols")
    sub.add_parser("hoverable", parents=[common], help="List hoverable ranges")
    sub.add_parser("filemap", parents=[common], help="Render a collapsed skeleton")
    definition = sub.add_parser("definition", parents=[common], help="Expand the entities at the given rows")
    definition.add_argument("--rows", type=int, nargs="+", required=True, help="1-based row numbers")
    complete = sub.add_parser("complete", parents=[common], help="Complete chunks into entity bodies")
    complete.add_argument(
        "--chunk", type=_parse_chunk_spec, action="append", required=True, help="1-based START:END, repeatable"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = load_config()
    if args.plain:
        config = replace(config, render=replace(config.render, with_line_numbers=False))

    try:
        payload = run(args, config)
    except (TreeSitterFileError, OSError) as e:
        logger.error("Failed processing %s: %s", args.file, e)
        print(json.dumps({"path": args.file, "error": str(e), "type": type(e).__name__}, ensure_ascii=False))
        return 1
    print(json.dumps(payload, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
