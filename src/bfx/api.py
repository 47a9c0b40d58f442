from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import MachineOptions
from .emitter import emit
from .files import load_program
from .lexer import filter_source
from .machine import RunResult, Stream, TapeMachine

logger = logging.getLogger(__name__)


def run_string(
    source: str,
    *,
    options: Optional[MachineOptions] = None,
    stdin: Optional[Stream] = None,
    stdout: Optional[Stream] = None,
) -> RunResult:
    # Compile errors come back as a result code, never as an exception.
    opts = options if options is not None else MachineOptions()
    if opts.resolve_on_load:
        opts = replace(opts, resolve_on_load=False)
    machine = TapeMachine(opts, stdin=stdin, stdout=stdout)
    machine.load(filter_source(source))
    return machine.run()


def run_file(
    path: str | Path,
    *,
    options: Optional[MachineOptions] = None,
    stdin: Optional[Stream] = None,
    stdout: Optional[Stream] = None,
    encoding: str = "utf-8",
) -> RunResult:
    logger.debug("running %s", path)
    return run_string(load_program(path, encoding=encoding), options=options, stdin=stdin, stdout=stdout)


def emit_string(source: str, *, target: str = 'c', options: Optional[MachineOptions] = None) -> str:
    opts = options if options is not None else MachineOptions()
    return emit(filter_source(source), target, capacity=opts.capacity, output_format=opts.output_format)


def emit_file(
    path: str | Path,
    *,
    target: str = 'c',
    options: Optional[MachineOptions] = None,
    encoding: str = "utf-8",
) -> str:
    return emit_string(load_program(path, encoding=encoding), target=target, options=options)
