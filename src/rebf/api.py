from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, TextIO

from .ast import Node, count_instructions
from .machine import EOF_UNCHANGED, MachineState
from .parser import parse


@dataclass(frozen=True)
class RunOptions:
    strict: bool = False
    eof: str = EOF_UNCHANGED
    dump_columns: int = 16


@dataclass(frozen=True)
class RunResult:
    tape: bytes
    pointer: int
    instructions: int


def parse_string(source: str, *, options: Optional[RunOptions] = None) -> Node:
    strict = False if options is None else options.strict
    return parse(source, strict=strict)


def run_string(
    source: str,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    debug: Optional[TextIO] = None,
    options: Optional[RunOptions] = None,
) -> RunResult:
    opts = RunOptions() if options is None else options
    tree = parse_string(source, options=opts)
    machine = MachineState(stdin, stdout, debug, eof=opts.eof, dump_columns=opts.dump_columns)
    tape = machine.run(tree)
    return RunResult(tape=tape, pointer=machine.pointer, instructions=count_instructions(tree))


def run_file(
    path: str | Path,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    debug: Optional[TextIO] = None,
    options: Optional[RunOptions] = None,
    encoding: str = "utf-8",
) -> RunResult:
    p = Path(path)
    return run_string(p.read_text(encoding=encoding), stdin=stdin, stdout=stdout, debug=debug, options=options)
