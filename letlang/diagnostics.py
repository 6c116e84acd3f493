"""Rendering of letlang diagnostics.

A :class:`~letlang.errors.LangError` only knows a character offset. This
module turns the offset into a 1-based line and column and prints the
surrounding source with a caret under the offending character::

    "+(OP)" should be a NUM: (line: 2, column: 10)
    --------------------------------------------
    001:let a := 1;
    002:let b := + 2;
                 ^
    003:print b
"""

import sys
from typing import List, Optional, TextIO, Tuple

from termcolor import colored

from letlang.errors import LangError

RULE = '-' * 44
ERROR = 'red'


def locate(source: str, position: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of ``position`` in ``source``."""
    line = 0
    column = 0
    for c in source[:position]:
        if c == '\n':
            line += 1
            column = 0
        elif c == '\r':
            continue
        else:
            column += 1
    return line + 1, column + 1


def _numbered(lines: List[str], index: int) -> str:
    if 0 <= index < len(lines):
        return f"{index + 1:03d}:{lines[index]}"
    return ''


def render(error: LangError, source: str, color: bool = True) -> str:
    """Format ``error`` with the source lines around its position."""
    line, column = locate(source, error.position)
    lines = source.replace('\r', '').split('\n')
    index = line - 1

    header = f"{error.message}: (line: {line}, column: {column})"
    caret = '^'
    if color:
        header = colored(header, ERROR, attrs=['bold'])
        caret = colored(caret, ERROR, attrs=['bold'])

    return '\n'.join([
        header,
        RULE,
        _numbered(lines, index - 1),
        _numbered(lines, index),
        '    ' + ' ' * (column - 1) + caret,
        _numbered(lines, index + 1),
    ])


def report(error: LangError, source: str, file: Optional[TextIO] = None, color: bool = True):
    """Write the rendered diagnostic to ``file`` (stderr by default)."""
    if file is None:
        file = sys.stderr
    print('', file=file)
    print(render(error, source, color=color), file=file)
    print('', file=file)
