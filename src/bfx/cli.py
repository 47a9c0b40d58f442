#!/usr/bin/env python3
# bfx: run, step through, or translate eight-instruction tape programs.
#
# Subcommands:
#   run     execute a program file
#   debug   step through a program interactively
#   emit    print equivalent C or C++ source
#   filter  print only the executable instructions
#   save    wrap stdin text in the saved-program envelope
#
from __future__ import annotations

import argparse
import io
import logging
import sys
import time
from typing import List, Optional

from .config import DEFAULT_CAPACITY, AddressingPolicy, MachineOptions, OutputFormat
from .debugger import debug_session, render_memory
from .emitter import TARGETS, emit
from .errors import BFXCompileError, PointerOutOfRange, RunStatus
from .files import load_program, save_program
from .lexer import filter_source
from .machine import TapeMachine

logger = logging.getLogger(__name__)

EXIT_FILE_ERROR = 3
EXIT_BAD_OPTION = 4


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _options_from_args(args: argparse.Namespace) -> MachineOptions:
    return MachineOptions(
        capacity=args.tape_size,
        policy=AddressingPolicy.BOUNDED if args.bounded else AddressingPolicy.WRAP,
        output_format=OutputFormat.INT if args.int_output else OutputFormat.CHAR,
        resolve_on_load=not args.lazy_jumps,
    )


def _add_machine_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--tape-size", type=int, default=DEFAULT_CAPACITY, help="Number of cells (default 30000)")
    p.add_argument("--bounded", action="store_true", help="Moving off either tape end is an error instead of wrapping")
    p.add_argument("--int-output", action="store_true", help="Print cell values as decimal numbers")
    p.add_argument("--lazy-jumps", action="store_true", help="Resolve brackets when the run starts, not on load")


def _open_input(path: Optional[str]):
    if path is None:
        return None
    return open(path, "rb")


def _cmd_run(args: argparse.Namespace) -> int:
    source = load_program(args.file)
    stdin = _open_input(args.input)
    try:
        machine = TapeMachine(_options_from_args(args), stdin=stdin)
        try:
            machine.load(filter_source(source))
        except BFXCompileError as exc:
            print(exc, file=sys.stderr)
            return int(RunStatus.COMPILE_ERROR)

        start = time.time()
        result = machine.run()
        end = time.time()
    finally:
        if stdin is not None:
            stdin.close()

    logger.info("execution took %.2f ms (%d steps)", (end - start) * 1000, result.steps)
    if result.error is not None:
        print(f"\n{result.error}", file=sys.stderr)
        if args.dump:
            print(render_memory(machine.state), file=sys.stderr)
    return int(result.status)


def _cmd_debug(args: argparse.Namespace) -> int:
    source = load_program(args.file)
    stdin = _open_input(args.input) or io.BytesIO()
    try:
        machine = TapeMachine(_options_from_args(args), stdin=stdin)
        try:
            machine.load(filter_source(source))
        except BFXCompileError as exc:
            print(exc, file=sys.stderr)
            return int(RunStatus.COMPILE_ERROR)
        try:
            debug_session(machine, input, print, radius=args.radius)
        except PointerOutOfRange as exc:
            print(exc, file=sys.stderr)
            print(render_memory(machine.state, args.radius), file=sys.stderr)
            return int(RunStatus.POINTER_OUT_OF_RANGE)
    finally:
        stdin.close()
    return int(RunStatus.SUCCESS)


def _cmd_emit(args: argparse.Namespace) -> int:
    source = load_program(args.file)
    text = emit(
        filter_source(source),
        args.target,
        capacity=args.tape_size,
        output_format=OutputFormat.INT if args.int_output else OutputFormat.CHAR,
    )
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("wrote %s source to %s", args.target, args.output)
    else:
        sys.stdout.write(text)
    return 0


def _cmd_filter(args: argparse.Namespace) -> int:
    print(filter_source(load_program(args.file)))
    return 0


def _cmd_save(args: argparse.Namespace) -> int:
    path = save_program(args.file, sys.stdin.read())
    print(f"Program saved successfully! {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bfx", description="Tape-language interpreter, debugger and source emitter.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("run", help="Execute a program")
    p.add_argument("file")
    p.add_argument("--input", help="Read ',' bytes from this file instead of stdin")
    p.add_argument("--dump", action="store_true", help="Print the tape around the pointer after a failed run")
    _add_machine_flags(p)
    p.set_defaults(func=_cmd_run)

    p = sub.add_parser("debug", help="Step through a program")
    p.add_argument("file")
    p.add_argument("--input", help="Read ',' bytes from this file (default: no input)")
    p.add_argument("--radius", type=int, default=10, help="Cells shown either side of the pointer")
    _add_machine_flags(p)
    p.set_defaults(func=_cmd_debug)

    p = sub.add_parser("emit", help="Translate a program to C or C++")
    p.add_argument("file")
    p.add_argument("--target", choices=sorted(TARGETS), default="c")
    p.add_argument("-o", "--output", help="Write to this file instead of stdout")
    p.add_argument("--tape-size", type=int, default=DEFAULT_CAPACITY)
    p.add_argument("--int-output", action="store_true")
    p.set_defaults(func=_cmd_emit)

    p = sub.add_parser("filter", help="Show the executable instructions only")
    p.add_argument("file")
    p.set_defaults(func=_cmd_filter)

    p = sub.add_parser("save", help="Save program text from stdin with the marker envelope")
    p.add_argument("file")
    p.set_defaults(func=_cmd_save)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except OSError as exc:
        print(f"Couldn't access file: {exc}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_BAD_OPTION


if __name__ == "__main__":
    raise SystemExit(main())
