from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .config import DEFAULT_CAPACITY


@dataclass
class MachineState:
    tape: np.ndarray = field(default_factory=lambda: np.zeros(DEFAULT_CAPACITY, dtype=np.uint8))
    data_pointer: int = 0
    instruction_pointer: int = 0
    steps: int = 0

    @classmethod
    def fresh(cls, capacity: int = DEFAULT_CAPACITY) -> "MachineState":
        return cls(tape=np.zeros(capacity, dtype=np.uint8))

    @property
    def capacity(self) -> int:
        return len(self.tape)

    @property
    def current_cell(self) -> int:
        return int(self.tape[self.data_pointer])

    def reset(self) -> None:
        self.tape.fill(0)
        self.data_pointer = 0
        self.instruction_pointer = 0
        self.steps = 0

    def window(self, radius: int = 10) -> List[Tuple[int, int]]:
        """(index, value) pairs for the cells within `radius` of the data pointer."""
        start = max(0, self.data_pointer - radius)
        end = min(self.capacity - 1, self.data_pointer + radius)
        return [(i, int(self.tape[i])) for i in range(start, end + 1)]
