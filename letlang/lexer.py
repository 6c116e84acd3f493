"""Tokenizer for letlang.

The lexer makes a single forward pass over the source text. At every
position the rules below are tried in order and the first one that matches
wins:

1. a keyword (``let``, ``if``, ``then``, ``else``, ``loop``) not followed by
   another identifier character;
2. a run of decimal digits;
3. a line comment, ``--`` up to the end of the line (discarded);
4. the symbols ``\\`` and ``;``;
5. the two-character operators ``->``, ``:=``, ``<=``, ``>=``, ``!=``;
6. the one-character operators ``=``, ``+``, ``-``, ``*``, ``/``, ``<``, ``>``;
7. parentheses and braces;
8. an identifier, a maximal run of ``[A-Za-z0-9_]``.

The lexer has no error state. A character that matches none of the rules is
emitted as a one-character ``SYMBOL`` token, which the parser then rejects
with a positioned diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class TokenKind(Enum):
    OPERATOR = 'OP'
    NUMBER = 'NUM'
    PAREN = 'PAREN'
    IDENT = 'IDENT'
    SYMBOL = 'SYMBOL'
    KEYWORD = 'KEYWORD'


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    position: int

    def __repr__(self) -> str:
        return f"{self.kind.value} {self.lexeme!r} @{self.position}"


KEYWORDS = ('let', 'if', 'then', 'else', 'loop')
WHITESPACE = frozenset(' \t\r\n')
LINE_BREAKS = frozenset('\r\n')
DIGITS = frozenset('0123456789')
IDENT_CHARS = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_')
SYMBOLS = frozenset('\\;')
TWO_CHAR_OPERATORS = ('->', ':=', '<=', '>=', '!=')
ONE_CHAR_OPERATORS = frozenset('=+-*/<>')
PARENS = frozenset('(){}')
COMMENT = '--'


def _keyword_at(source: str, i: int) -> Optional[str]:
    for keyword in KEYWORDS:
        end = i + len(keyword)
        if source.startswith(keyword, i) and (end >= len(source) or source[end] not in IDENT_CHARS):
            return keyword
    return None


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of positioned tokens."""
    tokens: List[Token] = []
    i = 0
    length = len(source)
    while i < length:
        c = source[i]
        if c in WHITESPACE:
            i += 1
            continue
        keyword = _keyword_at(source, i)
        if keyword is not None:
            tokens.append(Token(TokenKind.KEYWORD, keyword, i))
            i += len(keyword)
            continue
        if c in DIGITS:
            start = i
            while i < length and source[i] in DIGITS:
                i += 1
            tokens.append(Token(TokenKind.NUMBER, source[start:i], start))
            continue
        if source.startswith(COMMENT, i):
            while i < length and source[i] not in LINE_BREAKS:
                i += 1
            continue
        if c in SYMBOLS:
            tokens.append(Token(TokenKind.SYMBOL, c, i))
            i += 1
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, pair, i))
            i += 2
            continue
        if c in ONE_CHAR_OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, c, i))
            i += 1
            continue
        if c in PARENS:
            tokens.append(Token(TokenKind.PAREN, c, i))
            i += 1
            continue
        if c in IDENT_CHARS:
            start = i
            while i < length and source[i] in IDENT_CHARS:
                i += 1
            tokens.append(Token(TokenKind.IDENT, source[start:i], start))
            continue
        # stray character; left for the parser to reject
        tokens.append(Token(TokenKind.SYMBOL, c, i))
        i += 1
    return tokens
