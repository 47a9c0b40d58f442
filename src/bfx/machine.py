from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional, TextIO, Tuple, Union

import numpy as np
from numba import njit

from .config import MachineOptions, OutputFormat
from .errors import BFXCompileError, BFXError, PointerOutOfRange, RunStatus, make_pointer_error
from .jumps import JumpMap, jump_table, resolve_jumps
from .lexer import Program, filter_source
from .state import MachineState

logger = logging.getLogger(__name__)

Stream = Union[BinaryIO, TextIO]

# Reasons the compiled loop hands control back to Python
STOP_BATCH = 0
STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_HALT = 3
STOP_OUT_OF_RANGE = 4


@njit(cache=True)
def advance(program, tape, pc, pointer, jumps, bounded, max_steps):
    """
    Execute up to max_steps instructions starting at pc.

    I/O instructions are not executed here: the loop stops on them with pc
    still pointing at the '.' or ',' so the caller can perform the transfer.
    Under the bounded policy a move off either end of the tape stops the loop
    with pc on the offending instruction and nothing changed.
    """
    stop_reason = STOP_BATCH
    mem_len = len(tape)
    prog_len = len(program)
    steps = 0

    while pc < prog_len and steps < max_steps:
        command = program[pc]

        if command == 62:  # '>'
            if pointer == mem_len - 1:
                if bounded:
                    stop_reason = STOP_OUT_OF_RANGE
                    break
                pointer = 0
            else:
                pointer += 1
        elif command == 60:  # '<'
            if pointer == 0:
                if bounded:
                    stop_reason = STOP_OUT_OF_RANGE
                    break
                pointer = mem_len - 1
            else:
                pointer -= 1
        elif command == 43:  # '+'
            tape[pointer] = (int(tape[pointer]) + 1) & 255
        elif command == 45:  # '-'
            tape[pointer] = (int(tape[pointer]) - 1) & 255
        elif command == 46:  # '.'
            stop_reason = STOP_OUTPUT
            break
        elif command == 44:  # ','
            stop_reason = STOP_INPUT
            break
        elif command == 91:  # '['
            if tape[pointer] == 0:
                pc = jumps[pc]
        elif command == 93:  # ']'
            if tape[pointer] != 0:
                pc = jumps[pc]

        pc += 1
        steps += 1

    if stop_reason == STOP_BATCH and pc >= prog_len:
        stop_reason = STOP_HALT

    return pc, pointer, stop_reason, steps


@dataclass(frozen=True)
class RunResult:
    status: RunStatus
    error: Optional[BFXError] = None
    steps: int = 0

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.SUCCESS


def _binary_or_text(stream) -> Tuple[object, bool]:
    """Prefer the byte layer of a text stream; report whether we are left with text only."""
    if isinstance(stream, io.TextIOBase):
        buffer = getattr(stream, 'buffer', None)
        if buffer is None:
            return stream, True
        return buffer, False
    return stream, False


class TapeMachine:
    """
    Interpreter over a fixed-capacity byte tape.

    run() and step() are both thin drivers around advance(), so the two
    entry points cannot disagree on what an instruction does.
    """

    def __init__(
        self,
        options: Optional[MachineOptions] = None,
        *,
        stdin: Optional[Stream] = None,
        stdout: Optional[Stream] = None,
    ):
        self.options = options if options is not None else MachineOptions()
        self.stdin = stdin
        self.stdout = stdout
        self.state = MachineState.fresh(self.options.capacity)
        self.program = Program()
        self.jumps: Optional[JumpMap] = {}
        self._code = self.program.as_array()
        self._table = np.zeros(0, dtype=np.int64)

    @property
    def halted(self) -> bool:
        return self.state.instruction_pointer >= len(self.program)

    @property
    def next_instruction(self) -> Optional[str]:
        if self.halted:
            return None
        return self.program[self.state.instruction_pointer]

    def load(self, program: Union[Program, str]) -> None:
        """Install a program and reset the tape and both pointers."""
        if not isinstance(program, Program):
            program = filter_source(program)

        self.program = program
        self._code = program.as_array()
        self.jumps = None
        self._table = None
        self.state.reset()
        logger.debug("loaded %d instruction(s)", len(program))

        if self.options.resolve_on_load:
            self._resolve()

    def _resolve(self) -> None:
        if self.jumps is not None:
            return
        jumps = resolve_jumps(self.program)
        self._table = jump_table(self.program, jumps)
        self.jumps = jumps

    def _execute(self, max_steps: int) -> int:
        st = self.state
        pc, pointer, stop_reason, steps = advance(
            self._code, st.tape, st.instruction_pointer, st.data_pointer,
            self._table, self.options.bounded, max_steps,
        )
        st.instruction_pointer = int(pc)
        st.data_pointer = int(pointer)
        st.steps += int(steps)

        if stop_reason == STOP_OUTPUT:
            self._write_cell()
        elif stop_reason == STOP_INPUT:
            self._read_cell()
        else:
            return stop_reason

        st.instruction_pointer += 1
        st.steps += 1
        return stop_reason

    def _write_cell(self) -> None:
        value = self.state.current_cell
        stream = self.stdout if self.stdout is not None else sys.stdout
        if isinstance(stream, io.TextIOBase):
            stream.flush()
        sink, text_only = _binary_or_text(stream)

        if self.options.output_format is OutputFormat.INT:
            chunk = f"{value}\n"
            sink.write(chunk if text_only else chunk.encode('ascii'))
        else:
            sink.write(chr(value) if text_only else bytes([value]))
        sink.flush()

    def _read_cell(self) -> None:
        stream = self.stdin if self.stdin is not None else sys.stdin
        source, text_only = _binary_or_text(stream)
        data = source.read(1)
        if not data:
            return  # end of input leaves the cell as it was
        self.state.tape[self.state.data_pointer] = (ord(data) if text_only else data[0]) & 0xFF

    def _pointer_error(self) -> PointerOutOfRange:
        st = self.state
        return make_pointer_error(
            data_pointer=st.data_pointer,
            instruction_pointer=st.instruction_pointer,
            direction=self.program[st.instruction_pointer],
        )

    def step(self) -> bool:
        """
        Execute exactly one instruction.

        Returns False without doing anything once the program has finished.
        Raises PointerOutOfRange under the bounded policy; the state is left
        as it was before the faulting move.
        """
        if self.halted:
            return False
        self._resolve()
        if self._execute(1) == STOP_OUT_OF_RANGE:
            raise self._pointer_error()
        return True

    def run(self) -> RunResult:
        """Execute until the instruction pointer runs off the end of the program."""
        try:
            self._resolve()
        except BFXCompileError as exc:
            logger.warning("%s", exc.message.splitlines()[0])
            return RunResult(RunStatus.COMPILE_ERROR, error=exc, steps=self.state.steps)

        while True:
            stop_reason = self._execute(self.options.batch_size)
            if stop_reason == STOP_HALT:
                logger.debug("program finished after %d step(s)", self.state.steps)
                return RunResult(RunStatus.SUCCESS, steps=self.state.steps)
            if stop_reason == STOP_OUT_OF_RANGE:
                exc = self._pointer_error()
                logger.warning("%s", exc.message)
                return RunResult(RunStatus.POINTER_OUT_OF_RANGE, error=exc, steps=self.state.steps)
