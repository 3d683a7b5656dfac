"""Command-line interface: ``nestext load|dump|check``.

Also runnable as ``python -m nestext.cli``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO

from .config import DEFAULT_INDENT, DEFAULT_INLINE_LIMIT, DEFAULT_MAX_DEPTH
from .encoder import dump
from .errors import NestedTextError
from .parser import load, load_file

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _load_source(path: str, **kwargs):
    if path == "-":
        return load(sys.stdin.buffer, **kwargs)
    return load_file(path, **kwargs)


def _cmd_load(args: argparse.Namespace, dest: IO[str]) -> int:
    """Decode a NestedText file and print it as JSON."""
    value = _load_source(args.file, top_level=args.top_level, max_depth=args.max_depth)
    json.dump(value, dest, indent=2, ensure_ascii=False)
    print(file=dest)
    return 0


def _cmd_dump(args: argparse.Namespace, dest: IO[str]) -> int:
    """Read JSON and print it as NestedText."""
    try:
        if args.file == "-":
            value = json.load(sys.stdin)
        else:
            with open(args.file, encoding="utf-8") as fh:
                value = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error reading '{args.file}': {exc}", file=sys.stderr)
        return 1
    dump(value, dest, indent_by=args.indent_by, inline_limit=args.inline_limit)
    return 0


def _cmd_check(args: argparse.Namespace, dest: IO[str]) -> int:
    """Report OK or the first error for each file."""
    failed = 0
    for path in args.files:
        try:
            _load_source(path, max_depth=args.max_depth)
        except NestedTextError as exc:
            failed += 1
            print(f"{path}: {exc}", file=dest)
        else:
            print(f"OK: {path}", file=dest)
    return 1 if failed else 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="nestext", description="Read and write NestedText files.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p_load = sub.add_parser("load", help="Decode NestedText and print JSON")
    p_load.add_argument("file", help="NestedText file, or - for stdin")
    p_load.add_argument("--top-level", default=None, help="'list', 'dict' or 'dict.<key>'")
    p_load.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    p_load.set_defaults(func=_cmd_load)

    p_dump = sub.add_parser("dump", help="Encode JSON as NestedText")
    p_dump.add_argument("file", help="JSON file, or - for stdin")
    p_dump.add_argument("--indent-by", type=int, default=DEFAULT_INDENT)
    p_dump.add_argument("--inline-limit", type=int, default=DEFAULT_INLINE_LIMIT)
    p_dump.set_defaults(func=_cmd_dump)

    p_check = sub.add_parser("check", help="Validate NestedText files")
    p_check.add_argument("files", nargs="+", help="NestedText files")
    p_check.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    p_check.set_defaults(func=_cmd_check)
    return ap


def main(argv: list[str] | None = None, dest: IO[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    dest = dest if dest is not None else sys.stdout
    try:
        return args.func(args, dest)
    except NestedTextError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
