from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

CODE_CHARS = frozenset('><+-.,[]')


def is_code_char(ch: str) -> bool:
    return ch in CODE_CHARS


@dataclass(frozen=True)
class Program:
    """Canonical instruction stream: only the eight code characters, in source order."""

    code: str = ''

    def __post_init__(self) -> None:
        for pos, ch in enumerate(self.code):
            if not is_code_char(ch):
                raise ValueError(f"Invalid instruction {ch!r} at position {pos}")

    def __len__(self) -> int:
        return len(self.code)

    def __iter__(self) -> Iterator[str]:
        return iter(self.code)

    def __getitem__(self, index: int) -> str:
        return self.code[index]

    def __str__(self) -> str:
        return self.code

    def as_array(self) -> np.ndarray:
        # ASCII codes, the form the compiled execution loop dispatches on
        return np.frombuffer(self.code.encode('ascii'), dtype=np.uint8).copy()


def filter_source(source: str) -> Program:
    """Drop every character that is not one of the eight instructions.

    There is no comment syntax: anything outside the alphabet is a comment.
    """
    return Program(''.join(ch for ch in source if is_code_char(ch)))
