from __future__ import annotations

import logging
from typing import Dict, List

import numpy as np

from .errors import make_unmatched_close, make_unmatched_open
from .lexer import Program

logger = logging.getLogger(__name__)

JumpMap = Dict[int, int]


def resolve_jumps(program: Program) -> JumpMap:
    """Pair every '[' with its ']' in one left-to-right pass.

    The result maps both ends of each loop to each other. Raises
    UnmatchedCloseBracket on a ']' with nothing open and
    UnmatchedOpenBracket (for the innermost unclosed '[') at the end.
    """
    code = str(program)
    stack: List[int] = []
    jumps: JumpMap = {}

    for pos, cmd in enumerate(code):
        if cmd == '[':
            stack.append(pos)
        elif cmd == ']':
            if not stack:
                raise make_unmatched_close(code=code, index=pos)
            start = stack.pop()
            jumps[start] = pos
            jumps[pos] = start

    if stack:
        raise make_unmatched_open(code=code, index=stack[-1])

    logger.debug("resolved %d loop(s) in %d instruction(s)", len(jumps) // 2, len(code))
    return jumps


def jump_table(program: Program, jumps: JumpMap) -> np.ndarray:
    """Dense form of a JumpMap for the compiled loop; non-bracket slots map to themselves."""
    table = np.arange(len(program), dtype=np.int64)
    for k, v in jumps.items():
        table[k] = v
    return table
