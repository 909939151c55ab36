from __future__ import annotations

import sys
from typing import BinaryIO, Iterator, List, Optional, TextIO

import numpy as np

from .ast import End, Loop, Node, Run
from .errors import RebfInputExhausted, make_io_error
from .instructions import Instruction

EOF_UNCHANGED = 'unchanged'
EOF_ZERO = 'zero'
EOF_MAX = 'max'
EOF_ERROR = 'error'
EOF_POLICIES = (EOF_UNCHANGED, EOF_ZERO, EOF_MAX, EOF_ERROR)


class Tape:
    """
    Byte tape that only grows to the right, one cell at a time.

    Cells live in a uint8 array; its capacity doubles when full so that
    growing stays cheap while len(tape) increases by exactly one per grow().
    """

    def __init__(self, capacity: int = 64):
        self._cells = np.zeros(max(1, capacity), dtype=np.uint8)
        self._length = 1

    def grow(self) -> None:
        if self._length == len(self._cells):
            bigger = np.zeros(len(self._cells) * 2, dtype=np.uint8)
            bigger[:self._length] = self._cells
            self._cells = bigger
        self._length += 1

    def _check(self, index: int) -> int:
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError(f'tape index {index} out of range')
        return index

    def __getitem__(self, index: int) -> int:
        return int(self._cells[self._check(index)])

    def __setitem__(self, index: int, value: int) -> None:
        self._cells[self._check(index)] = int(value) & 0xFF

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[int]:
        return iter(self.tolist())

    def tolist(self) -> List[int]:
        return self._cells[:self._length].tolist()

    def tobytes(self) -> bytes:
        return self._cells[:self._length].tobytes()


class MachineState:
    """
    Evaluator for program trees.

    Owns the tape and the pointer. Print and Read use binary channels, the
    debug dump ('#') goes to a separate text channel.
    """

    def __init__(
        self,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        debug: Optional[TextIO] = None,
        *,
        eof: str = EOF_UNCHANGED,
        dump_columns: int = 16,
    ):
        if eof not in EOF_POLICIES:
            raise ValueError(f"Unknown EOF policy: {eof!r} (expected one of {', '.join(EOF_POLICIES)})")
        if dump_columns < 1:
            raise ValueError('dump_columns must be at least 1')
        self._stdin = stdin
        self._stdout = stdout
        self._debug = debug
        self.eof = eof
        self.dump_columns = dump_columns
        self.reset()

    def reset(self) -> None:
        self.pointer = 0
        self.tape = Tape()

    # ===== Channels =====
    # Resolved on use so that redirected sys streams are honoured.

    @property
    def stdin(self) -> BinaryIO:
        return self._stdin if self._stdin is not None else sys.stdin.buffer

    @property
    def stdout(self) -> BinaryIO:
        return self._stdout if self._stdout is not None else sys.stdout.buffer

    @property
    def debug(self) -> TextIO:
        return self._debug if self._debug is not None else sys.stderr

    # ===== Cell and pointer operations =====

    @property
    def current(self) -> int:
        return self.tape[self.pointer]

    def move_right(self) -> None:
        self.pointer += 1
        if self.pointer == len(self.tape):
            self.tape.grow()

    def move_left(self) -> None:
        if self.pointer != 0:
            self.pointer -= 1

    def increment(self) -> None:
        self.tape[self.pointer] = (self.current + 1) % 256

    def decrement(self) -> None:
        self.tape[self.pointer] = (self.current - 1) % 256

    def print(self) -> None:
        try:
            self.stdout.write(bytes([self.current]))
            self.stdout.flush()
        except (OSError, ValueError) as e:
            raise make_io_error(operation=Instruction.PRINT.char, error=e) from e

    def read(self) -> None:
        try:
            data = self.stdin.read(1)
        except (OSError, ValueError) as e:
            raise make_io_error(operation=Instruction.READ.char, error=e) from e

        if data:
            self.tape[self.pointer] = data[0]
        elif self.eof == EOF_ZERO:
            self.tape[self.pointer] = 0
        elif self.eof == EOF_MAX:
            self.tape[self.pointer] = 255
        elif self.eof == EOF_ERROR:
            raise RebfInputExhausted(message=f"InputExhausted: ',' at cell {self.pointer} found no more input")

    def dump(self) -> str:
        cells = []
        for index, value in enumerate(self.tape.tolist()):
            marker = '<' if index == self.pointer else ' '
            cells.append(f" {value:02X} {marker} ")
        rows = [''.join(cells[i:i + self.dump_columns]) for i in range(0, len(cells), self.dump_columns)]
        return '\n'.join(rows)

    def debug_dump(self) -> None:
        try:
            self.debug.write(self.dump() + '\n')
            self.debug.flush()
        except (OSError, ValueError) as e:
            raise make_io_error(operation=Instruction.DEBUG_DUMP.char, error=e) from e

    def __str__(self) -> str:
        return self.dump()

    # ===== Execution =====

    def apply(self, instr: Instruction) -> None:
        if instr is Instruction.MOVE_RIGHT:
            self.move_right()
        elif instr is Instruction.MOVE_LEFT:
            self.move_left()
        elif instr is Instruction.INCREMENT:
            self.increment()
        elif instr is Instruction.DECREMENT:
            self.decrement()
        elif instr is Instruction.PRINT:
            self.print()
        elif instr is Instruction.READ:
            self.read()
        elif instr is Instruction.DEBUG_DUMP:
            self.debug_dump()

    def run(self, tree: Node) -> bytes:
        """
        Execute `tree` and return the tape contents afterwards.

        Loops are entered only while the cell under the pointer is nonzero and
        the check happens before every repetition. A loop whose body is
        entered stays on the stack, so finishing the body re-tests it.
        """
        stack: List[Node] = [tree]
        while stack:
            node = stack.pop()
            while not isinstance(node, End):
                if isinstance(node, Run):
                    for op in node.instructions:
                        self.apply(op)
                    node = node.next
                elif isinstance(node, Loop):
                    if self.current == 0:
                        node = node.next
                    else:
                        stack.append(node)
                        node = node.body
        return self.tape.tobytes()
