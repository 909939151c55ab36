#!/usr/bin/env python3
"""
Parser and tree tests: run chaining, loop nesting, bracket policies, re-serialization.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from rebf import END, End, Instruction, Loop, RebfSyntaxError, Run, chain, count_instructions, parse, to_source

PRINT = Instruction.PRINT
DEBUG = Instruction.DEBUG_DUMP


def test_instruction_chars_are_bijective():
    """Every instruction maps to its character and back; delimiters are not instructions."""
    chars = [op.char for op in Instruction]
    assert sorted(chars) == sorted('><+-.,#')
    for op in Instruction:
        assert Instruction.from_char(op.char) is op
        assert str(op) == op.char
    for ch in '[] ax\n':
        assert Instruction.from_char(ch) is None


def test_empty_program():
    """Empty source parses to the end marker."""
    assert parse('') == END
    assert isinstance(parse(''), End)


def test_one_instruction():
    assert parse('.') == Run((PRINT,), END)


def test_multiple_instructions():
    """A stretch of instructions becomes a single run."""
    assert parse('.#.#') == Run((PRINT, DEBUG, PRINT, DEBUG), END)


def test_empty_loop():
    assert parse('[]') == Loop(END, END)


def test_prefixed_loop():
    assert parse('..[]') == Run((PRINT, PRINT), Loop(END, END))


def test_simple_loop():
    assert parse('[..]') == Loop(Run((PRINT, PRINT), END), END)


def test_normal_loop():
    """`[.].`: loop body and continuation are separate runs."""
    assert parse('[.].') == Loop(Run((PRINT,), END), Run((PRINT,), END))


def test_nested_loops():
    """Instructions after an inner loop belong to the inner loop's continuation."""
    plus = Instruction.INCREMENT
    minus = Instruction.DECREMENT
    tree = parse('+[>[-]<-]+')
    expected = Run(
        (plus,),
        Loop(
            Run((Instruction.MOVE_RIGHT,), Loop(Run((minus,), END), Run((Instruction.MOVE_LEFT, minus), END))),
            Run((plus,), END),
        ),
    )
    assert tree == expected


def test_comments_are_skipped():
    assert parse('hello . world\n#') == Run((PRINT, DEBUG), END)


def test_chain_collapses_empty_runs():
    """No run is ever built without instructions."""
    assert chain([], END) is END
    loop = Loop(END, END)
    assert chain((), loop) is loop
    assert chain([PRINT], END) == Run((PRINT,), END)
    with pytest.raises(ValueError):
        Run((), END)


@pytest.mark.parametrize('program', [
    '',
    '+',
    '[]',
    '[][]',
    '++[>+<-]>.',
    ',[.,]#',
    '[[[]]]',
    '>>[-]<<[->+<]',
    '++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++.',
])
def test_round_trip(program):
    """Well-formed programs serialize back to exactly the same text."""
    tree = parse(program)
    assert to_source(tree) == program
    assert str(tree) == program


def test_round_trip_drops_comments():
    assert to_source(parse('add [ one + ] then print .')) == '[+].'


def test_count_instructions():
    assert count_instructions(parse('')) == 0
    assert count_instructions(parse('+[->+<]>.')) == 7


def test_unmatched_close_truncates():
    """Lenient mode drops everything after a stray ']'."""
    assert parse('+]-') == Run((Instruction.INCREMENT,), END)
    assert parse('[+]]-') == Loop(Run((Instruction.INCREMENT,), END), END)
    assert parse(']+++') == END


def test_unclosed_open_is_closed_at_end():
    assert parse('[') == Loop(END, END)
    assert parse('+[') == Run((Instruction.INCREMENT,), Loop(END, END))
    assert parse('[+') == Loop(Run((Instruction.INCREMENT,), END), END)
    assert parse('[[+') == Loop(Loop(Run((Instruction.INCREMENT,), END), END), END)


@pytest.mark.parametrize('program, delimiter', [
    (']', ']'),
    ('+]', ']'),
    ('[]]', ']'),
    ('[', '['),
    ('[[]', '['),
])
def test_strict_mode_rejects_unbalanced(program, delimiter):
    with pytest.raises(RebfSyntaxError) as exc:
        parse(program, strict=True)
    assert exc.value.delimiter == delimiter
    assert 'Hint:' in str(exc.value)


def test_strict_mode_accepts_balanced():
    assert parse('[.].', strict=True) == parse('[.].')


def test_many_sequential_loops():
    """Thousands of loops in a row do not hit the recursion limit."""
    program = '[-]>' * 5000
    tree = parse(program)
    assert to_source(tree) == program
    assert count_instructions(tree) == 10000


def test_deep_nesting():
    depth = sys.getrecursionlimit() * 3
    program = '[' * depth + '+' + ']' * depth
    tree = parse(program, strict=True)
    assert to_source(tree) == program
    assert count_instructions(tree) == 1
