from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from .api import RunOptions, parse_string
from .ast import count_instructions
from .errors import RebfError
from .machine import EOF_POLICIES, EOF_UNCHANGED, MachineState


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rebf",
        description="Run a Brainfuck program ('#' dumps the tape to stderr).",
    )
    parser.add_argument("source", metavar="SOURCE_FILE", help="program to run")
    parser.add_argument("--strict", action="store_true", help="reject unmatched '[' or ']' instead of truncating")
    parser.add_argument("--eof", choices=EOF_POLICIES, default=EOF_UNCHANGED,
                        help="what ',' stores once input is exhausted (default: unchanged)")
    parser.add_argument("--dump-columns", type=int, default=16, help="cells per row in '#' dumps (default 16)")
    parser.add_argument("--time", action="store_true", help="report parse and execution time on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    # Only the 7 ASCII commands matter; latin-1 decodes any byte in comments.
    try:
        code = Path(args.source).read_bytes().decode("latin-1")
    except FileNotFoundError:
        print(f"Couldn't find file: {args.source}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Couldn't read file: {args.source} ({e.strerror or e})", file=sys.stderr)
        return 1

    if args.dump_columns < 1:
        print("--dump-columns must be at least 1", file=sys.stderr)
        return 1

    options = RunOptions(strict=args.strict, eof=args.eof, dump_columns=args.dump_columns)

    try:
        start = time.time()
        tree = parse_string(code, options=options)
        end = time.time()
        parse_ms = (end - start) * 1000

        machine = MachineState(eof=options.eof, dump_columns=options.dump_columns)
        start = time.time()
        machine.run(tree)
        end = time.time()
    except RebfError as e:
        print(e, file=sys.stderr)
        return 1

    if args.time:
        print(f"Parsing took {parse_ms:.2f} ms ({count_instructions(tree)} instructions)", file=sys.stderr)
        print(f"Execution took {(end - start) * 1000:.2f} ms", file=sys.stderr)
    return 0
