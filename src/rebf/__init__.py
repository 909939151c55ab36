from .ast import END, End, Loop, Run, chain, count_instructions, iter_chain, to_source
from .errors import RebfError, RebfInputExhausted, RebfIOError, RebfSyntaxError
from .instructions import Instruction
from .machine import MachineState, Tape
from .parser import parse
from .api import RunOptions, RunResult, parse_string, run_file, run_string

__all__ = [
    'END',
    'End',
    'Loop',
    'Run',
    'chain',
    'count_instructions',
    'iter_chain',
    'to_source',
    'RebfError',
    'RebfInputExhausted',
    'RebfIOError',
    'RebfSyntaxError',
    'Instruction',
    'MachineState',
    'Tape',
    'parse',
    'RunOptions',
    'RunResult',
    'parse_string',
    'run_file',
    'run_string',
]
