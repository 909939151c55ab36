from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple, Union

from .instructions import LOOP_CLOSE, LOOP_OPEN, Instruction


# ---------------- Tree nodes ----------------
@dataclass(frozen=True)
class End:
    """Terminal marker; every chain of the tree ends here."""

    def __str__(self) -> str:
        return ''


@dataclass(frozen=True)
class Run:
    instructions: Tuple[Instruction, ...]
    next: 'Node'

    def __post_init__(self) -> None:
        if not self.instructions:
            raise ValueError('Run needs at least one instruction')
        object.__setattr__(self, 'instructions', tuple(self.instructions))

    def __str__(self) -> str:
        return to_source(self)


@dataclass(frozen=True)
class Loop:
    body: 'Node'
    next: 'Node'

    def __str__(self) -> str:
        return to_source(self)


Node = Union[Run, Loop, End]
END = End()


def chain(ops: Iterable[Instruction], next: Node) -> Node:
    """Prefix `next` with a Run of `ops`, or return `next` itself when there are none."""
    ops = tuple(ops)
    if not ops:
        return next
    return Run(ops, next)


# ---------------- Walking ----------------
def iter_chain(node: Node) -> Iterator[Union[Run, Loop]]:
    """Yield the nodes of one continuation chain, root first, without descending into loop bodies."""
    while not isinstance(node, End):
        yield node
        node = node.next


def to_source(node: Node) -> str:
    """Canonical program text: one character per instruction, loop bodies in brackets."""
    out: List[str] = []
    # Pending work: either a subtree to emit or a literal closing bracket.
    stack: List[Union[Node, str]] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        for n in iter_chain(item):
            if isinstance(n, Run):
                out.extend(op.char for op in n.instructions)
            else:
                out.append(LOOP_OPEN)
                stack.append(n.next)
                stack.append(LOOP_CLOSE)
                stack.append(n.body)
                break
    return ''.join(out)


def count_instructions(node: Node) -> int:
    c = 0
    stack: List[Node] = [node]
    while stack:
        for n in iter_chain(stack.pop()):
            if isinstance(n, Run):
                c += len(n.instructions)
            else:
                stack.append(n.body)
    return c
