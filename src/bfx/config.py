from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_CAPACITY = 30000


class AddressingPolicy(str, Enum):
    WRAP = 'wrap'
    BOUNDED = 'bounded'


class OutputFormat(str, Enum):
    CHAR = 'char'
    INT = 'int'


@dataclass(frozen=True)
class MachineOptions:
    capacity: int = DEFAULT_CAPACITY
    policy: AddressingPolicy = AddressingPolicy.WRAP
    output_format: OutputFormat = OutputFormat.CHAR
    resolve_on_load: bool = True
    batch_size: int = 50000  # instructions per call into the compiled loop

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"Tape capacity must be positive, got {self.capacity}")
        if self.batch_size < 1:
            raise ValueError(f"Batch size must be positive, got {self.batch_size}")
        # accept plain strings from argparse or callers
        object.__setattr__(self, 'policy', AddressingPolicy(self.policy))
        object.__setattr__(self, 'output_format', OutputFormat(self.output_format))

    @property
    def bounded(self) -> bool:
        return self.policy is AddressingPolicy.BOUNDED
