from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

from .config import DEFAULT_CAPACITY, OutputFormat
from .lexer import Program, filter_source


@dataclass(frozen=True)
class Target:
    """Surface syntax for one emission language.

    `prologue` may reference {capacity}. Every instruction maps to exactly one
    line; '[' and ']' open and close a native while block.
    """

    name: str
    prologue: str
    epilogue: str
    lines: Dict[str, str] = field(default_factory=dict)
    output_int: str = ''


_COMMON_LINES = {
    '>': '++ptr;',
    '<': '--ptr;',
    '+': '++*ptr;',
    '-': '--*ptr;',
    '[': 'while (*ptr) {',
    ']': '}',
}

C_TARGET = Target(
    name='c',
    prologue=(
        "#include <stdio.h>\n"
        "\n"
        "int main(void) {{\n"
        "    unsigned char memory[{capacity}] = {{0}};\n"
        "    unsigned char *ptr = memory;\n"
        "\n"
    ),
    epilogue="\n    return 0;\n}\n",
    lines={
        **_COMMON_LINES,
        '.': 'putchar(*ptr);',
        ',': '{ int c = getchar(); if (c != EOF) *ptr = (unsigned char)c; }',
    },
    output_int='printf("%d\\n", *ptr);',
)

CPP_TARGET = Target(
    name='cpp',
    prologue=(
        "#include <iostream>\n"
        "#include <string>\n"
        "#include <vector>\n"
        "\n"
        "int main() {{\n"
        "    std::vector<unsigned char> memory({capacity}, 0);\n"
        "    unsigned char *ptr = memory.data();\n"
        "\n"
    ),
    epilogue="\n    return 0;\n}\n",
    lines={
        **_COMMON_LINES,
        '.': 'std::cout << *ptr;',
        ',': '{ int c = std::cin.get(); if (c != std::char_traits<char>::eof()) *ptr = static_cast<unsigned char>(c); }',
    },
    output_int='std::cout << static_cast<int>(*ptr) << "\\n";',
)

TARGETS: Dict[str, Target] = {t.name: t for t in (C_TARGET, CPP_TARGET)}


def emit(
    program: Union[Program, str],
    target: Union[Target, str] = C_TARGET,
    *,
    capacity: int = DEFAULT_CAPACITY,
    output_format: OutputFormat = OutputFormat.CHAR,
) -> str:
    # Brackets are not checked here: an unbalanced program gives unbalanced braces.
    if not isinstance(program, Program):
        program = filter_source(program)
    if isinstance(target, str):
        try:
            target = TARGETS[target]
        except KeyError:
            raise ValueError(f"Unknown emission target: {target!r} (expected one of {sorted(TARGETS)})") from None

    lines = dict(target.lines)
    if OutputFormat(output_format) is OutputFormat.INT:
        lines['.'] = target.output_int

    out: List[str] = [target.prologue.format(capacity=capacity)]
    for cmd in program:
        out.append(f"    {lines[cmd]}\n")
    out.append(target.epilogue)
    return ''.join(out)


def emit_c(program: Union[Program, str], **kwargs) -> str:
    return emit(program, C_TARGET, **kwargs)


def emit_cpp(program: Union[Program, str], **kwargs) -> str:
    return emit(program, CPP_TARGET, **kwargs)
