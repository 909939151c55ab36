from __future__ import annotations

from typing import List, Union

from .ast import END, Loop, Node, chain
from .errors import make_syntax_error
from .instructions import LOOP_CLOSE, LOOP_OPEN, Instruction

# A frame holds the instructions and finished loop bodies of one nesting level, in source order.
Frame = List[Union[Instruction, Node]]


def _fold(frame: Frame) -> Node:
    # Built right to left so each node can be created with its continuation.
    node: Node = END
    pending: List[Instruction] = []
    for item in reversed(frame):
        if isinstance(item, Instruction):
            pending.append(item)
            continue
        node = Loop(item, chain(reversed(pending), node))
        pending = []
    return chain(reversed(pending), node)


def parse(source: str, *, strict: bool = False) -> Node:
    """
    Parse program text into a tree.

    Instruction characters accumulate into runs, `[`...`]` become Loop nodes and
    every other character is ignored.

    Bracket errors:
    - strict=False: an unmatched ']' ends the program there, the rest of the
      source is dropped; loops still open at end of input are closed implicitly.
    - strict=True: both cases raise RebfSyntaxError.
    """
    frames: List[Frame] = [[]]

    for ch in source:
        op = Instruction.from_char(ch)
        if op is not None:
            frames[-1].append(op)
        elif ch == LOOP_OPEN:
            frames.append([])
        elif ch == LOOP_CLOSE:
            if len(frames) == 1:
                if strict:
                    raise make_syntax_error(message="Unmatched ']' with no open loop", delimiter=LOOP_CLOSE)
                break
            body = _fold(frames.pop())
            frames[-1].append(body)

    if len(frames) > 1 and strict:
        raise make_syntax_error(
            message=f"Unclosed '[' at end of input ({len(frames) - 1} open)",
            delimiter=LOOP_OPEN,
        )

    while len(frames) > 1:
        body = _fold(frames.pop())
        frames[-1].append(body)

    return _fold(frames[0])
