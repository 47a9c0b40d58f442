from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Union

from .lexer import filter_source

logger = logging.getLogger(__name__)

HEADER = "/* Brainfuck Program with Comments */\n/* Saved from Brainfuck IDE */\n\n"
FOOTER_MARKER = "/* Filtered executable code: */"

_ENVELOPE = re.compile(
    r'\A/\* Brainfuck Program with Comments \*/\n'
    r'/\* Saved from Brainfuck IDE \*/\n\n'
    r'(?P<body>.*)\n\n'
    r'/\* Filtered executable code: \*/\n'
    r'/\* [^\n]* \*/\n?\Z',
    re.DOTALL,
)


def wrap_program(source: str) -> str:
    """Source text between the header markers, followed by an echo of the filtered code."""
    filtered = str(filter_source(source))
    return f"{HEADER}{source}\n\n{FOOTER_MARKER}\n/* {filtered} */\n"


def unwrap_program(text: str) -> str:
    # The echoed code would run twice if it were filtered along with the body.
    m = _ENVELOPE.match(text)
    if m is None:
        return text
    return m.group('body')


def save_program(path: Union[str, Path], source: str, *, encoding: str = "utf-8") -> Path:
    p = Path(path)
    if not p.suffix:
        p = p.with_suffix('.bf')
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(wrap_program(source), encoding=encoding)
    logger.info("saved program to %s", p)
    return p


def load_program(path: Union[str, Path], *, encoding: str = "utf-8") -> str:
    p = Path(path)
    text = p.read_text(encoding=encoding)
    logger.debug("read %d character(s) from %s", len(text), p)
    return unwrap_program(text)
