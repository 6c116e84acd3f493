# letlang package
# A lexer, parser and tree-walking interpreter for a small expression language.
from .errors import LangError
from .interpreter import Interpreter, run_file, run_source
from .lexer import tokenize
from .parser import parse, parse_program

__all__ = [
    'Interpreter',
    'LangError',
    'parse',
    'parse_program',
    'run_file',
    'run_source',
    'tokenize',
]
