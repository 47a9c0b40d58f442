from .api import emit_file, emit_string, run_file, run_string
from .config import AddressingPolicy, MachineOptions, OutputFormat
from .emitter import C_TARGET, CPP_TARGET, emit, emit_c, emit_cpp
from .errors import (
    BFXCompileError,
    BFXError,
    PointerOutOfRange,
    RunStatus,
    UnmatchedCloseBracket,
    UnmatchedOpenBracket,
)
from .jumps import JumpMap, resolve_jumps
from .lexer import Program, filter_source
from .machine import RunResult, TapeMachine
from .state import MachineState

__all__ = [
    'AddressingPolicy',
    'BFXCompileError',
    'BFXError',
    'C_TARGET',
    'CPP_TARGET',
    'JumpMap',
    'MachineOptions',
    'MachineState',
    'OutputFormat',
    'PointerOutOfRange',
    'Program',
    'RunResult',
    'RunStatus',
    'TapeMachine',
    'UnmatchedCloseBracket',
    'UnmatchedOpenBracket',
    'emit',
    'emit_c',
    'emit_cpp',
    'emit_file',
    'emit_string',
    'filter_source',
    'resolve_jumps',
    'run_file',
    'run_string',
]
