#!/usr/bin/env python3
"""
Tests for bracket matching and the jump map.
"""

import pytest

from bfx.errors import BFXCompileError, UnmatchedCloseBracket, UnmatchedOpenBracket
from bfx.jumps import jump_table, resolve_jumps
from bfx.lexer import Program


BALANCED = [
    "",
    "[]",
    "[[]][]",
    "+[-]",
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.",
    "[[[[[]]]]]",
    "[][][][]",
]


@pytest.mark.parametrize("code", BALANCED)
def test_jump_map_is_an_involution(code):
    """Following a jump twice lands back where it started."""
    jumps = resolve_jumps(Program(code))
    bracket_positions = {i for i, ch in enumerate(code) if ch in "[]"}
    assert set(jumps) == bracket_positions
    for i in jumps:
        assert jumps[jumps[i]] == i


@pytest.mark.parametrize("code", BALANCED)
def test_pairs_point_forward_from_open(code):
    jumps = resolve_jumps(Program(code))
    for i, ch in enumerate(code):
        if ch == "[":
            assert jumps[i] > i
            assert code[jumps[i]] == "]"


def test_nested_pairs():
    jumps = resolve_jumps(Program("[[]]"))
    assert jumps == {0: 3, 3: 0, 1: 2, 2: 1}


def test_empty_program_resolves():
    assert resolve_jumps(Program("")) == {}


def test_single_close_bracket():
    with pytest.raises(UnmatchedCloseBracket) as info:
        resolve_jumps(Program("]"))
    assert info.value.index == 0


def test_unclosed_open_bracket():
    with pytest.raises(UnmatchedOpenBracket) as info:
        resolve_jumps(Program("+["))
    assert info.value.index == 1


@pytest.mark.parametrize("code,index", [("[]]", 2), ("][", 0), ("+-]+[", 2)])
def test_unmatched_close_positions(code, index):
    with pytest.raises(UnmatchedCloseBracket) as info:
        resolve_jumps(Program(code))
    assert info.value.index == index


@pytest.mark.parametrize("code,index", [("[[]", 0), ("[][", 2), ("+[[", 2)])
def test_unmatched_open_positions(code, index):
    with pytest.raises(UnmatchedOpenBracket) as info:
        resolve_jumps(Program(code))
    assert info.value.index == index


def test_compile_errors_share_a_base_class():
    for code in ("]", "["):
        with pytest.raises(BFXCompileError):
            resolve_jumps(Program(code))


def test_error_message_points_at_the_bracket():
    with pytest.raises(UnmatchedCloseBracket) as info:
        resolve_jumps(Program("++]"))
    message = str(info.value)
    assert message.startswith("CompileError: unmatched ']' at instruction 2")
    assert "^" in info.value.context
    assert "Hint:" in message


def test_jump_table_dense_form():
    program = Program("+[-]")
    table = jump_table(program, resolve_jumps(program))
    assert table.tolist() == [0, 3, 2, 1]
