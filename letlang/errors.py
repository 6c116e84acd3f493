"""Diagnostics raised by the letlang lexer, parser and interpreter.

Every recoverable failure is a :class:`LangError` carrying a message and a
zero-based character offset into the source. The subclasses only name the
kind of failure; consumers that do not care about the kind can catch the
base class and hand it to :mod:`letlang.diagnostics`.
"""


class LangError(Exception):
    """Exception type used to propagate letlang diagnostics."""
    kind = 'Error'

    def __init__(self, message: str, position: int = 0):
        super().__init__(message)
        self.message = message
        self.position = position

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, position={self.position})"


class LangSyntaxError(LangError):
    """An expected token kind or value was not found."""
    kind = 'SyntaxError'


class UnboundVariable(LangError):
    kind = 'UnboundVariable'

    def __init__(self, name: str, position: int = 0):
        super().__init__(f"variable {name} hasn't been bound to any value", position)
        self.name = name


class ArityMismatch(LangError):
    kind = 'ArityMismatch'

    def __init__(self, name: str, expected: int, given: int, position: int = 0):
        super().__init__(f'Arity of "{name}" is {expected}, but {given} given', position)
        self.name = name
        self.expected = expected
        self.given = given


class NotCallable(LangError):
    kind = 'NotCallable'


class TypeMismatch(LangError):
    kind = 'TypeMismatch'


class DivisionByZero(LangError):
    kind = 'DivisionByZero'


class UnknownOperator(LangError):
    kind = 'UnknownOperator'


class UnexpectedNode(LangError):
    kind = 'UnexpectedNode'


class NumericOverflow(LangError):
    kind = 'NumericOverflow'
