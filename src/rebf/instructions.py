from __future__ import annotations

from enum import Enum
from typing import Optional

LOOP_OPEN = '['
LOOP_CLOSE = ']'


class Instruction(Enum):
    MOVE_RIGHT = '>'
    MOVE_LEFT = '<'
    INCREMENT = '+'
    DECREMENT = '-'
    PRINT = '.'
    READ = ','
    DEBUG_DUMP = '#'

    @property
    def char(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, ch: str) -> Optional['Instruction']:
        return _BY_CHAR.get(ch)

    def __str__(self) -> str:
        return self.value


_BY_CHAR = {op.value: op for op in Instruction}
