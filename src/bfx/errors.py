from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional


class RunStatus(IntEnum):
    SUCCESS = 0
    POINTER_OUT_OF_RANGE = 1
    COMPILE_ERROR = 2


def _build_context(code: str, index: int, *, context: int = 20) -> str:
    start = max(0, index - context)
    end = min(len(code), index + context + 1)

    out: List[str] = []
    lead = '...' if start > 0 else ''
    tail = '...' if end < len(code) else ''
    out.append(f"  {index:6d} | {lead}{code[start:end]}{tail}")
    out.append(f"  {'':6s} | {' ' * (len(lead) + index - start)}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'open':
        return 'Add a matching "]" or remove the "[" that starts this loop.'
    if kind == 'close':
        return 'There is no "[" before this "]". Remove it or open the loop earlier.'
    return None


@dataclass(eq=False)
class BFXError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class BFXCompileError(BFXError):
    index: int
    context: str


@dataclass(eq=False)
class UnmatchedOpenBracket(BFXCompileError):
    pass


@dataclass(eq=False)
class UnmatchedCloseBracket(BFXCompileError):
    pass


@dataclass(eq=False)
class PointerOutOfRange(BFXError):
    data_pointer: int
    instruction_pointer: int


def make_unmatched_open(*, code: str, index: int) -> UnmatchedOpenBracket:
    ctx = _build_context(code, index)
    hint = _hint_for('open')
    hint_block = f"\nHint: {hint}" if hint else ""
    return UnmatchedOpenBracket(
        message=f"CompileError: unmatched '[' at instruction {index}\n{ctx}{hint_block}",
        index=index,
        context=ctx,
    )


def make_unmatched_close(*, code: str, index: int) -> UnmatchedCloseBracket:
    ctx = _build_context(code, index)
    hint = _hint_for('close')
    hint_block = f"\nHint: {hint}" if hint else ""
    return UnmatchedCloseBracket(
        message=f"CompileError: unmatched ']' at instruction {index}\n{ctx}{hint_block}",
        index=index,
        context=ctx,
    )


def make_pointer_error(*, data_pointer: int, instruction_pointer: int, direction: str) -> PointerOutOfRange:
    edge = 'past the end of' if direction == '>' else 'before the start of'
    return PointerOutOfRange(
        message=(
            f"PointerOutOfRange: '{direction}' at instruction {instruction_pointer} "
            f"moves the data pointer {edge} the tape (data pointer {data_pointer})"
        ),
        data_pointer=data_pointer,
        instruction_pointer=instruction_pointer,
    )
