"""Runtime values for letlang.

A value produced by the interpreter is one of:

* ``int`` or ``float`` (numbers; ``/`` can produce a float),
* ``bool`` (comparison results),
* ``str`` (the text returned by ``print`` and the ``"fn"`` marker),
* ``list`` of values (results of blocks, programs and loops),
* :class:`FunctionValue`,
* ``None``.

The helpers here render, name and test values the same way everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Union

from .ast import Node


@dataclass
class FunctionValue:
    """A user-defined function: ordered parameter names and a body."""
    params: List[str]
    body: Node

    def __repr__(self) -> str:
        if not self.params:
            return '<fn>'
        return f"<fn {' '.join(self.params)}>"


RuntimeValue = Union[int, float, bool, str, List[Any], FunctionValue, None]


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, (int, float)):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, list):
        return 'Sequence'
    if isinstance(value, FunctionValue):
        return 'Function'
    if value is None:
        return 'Null'
    return type(value).__name__


def is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return len(value) > 0
    if value is None:
        return False
    # sequences and functions are always truthy, even when empty
    return True


def to_string(value: Any) -> str:
    """Render a value as text, as ``print`` shows it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ','.join('' if item is None else to_string(item) for item in value)
    if value is None:
        return 'null'
    return repr(value)
