"""Recursive-descent parser for letlang.

Grammar, loosest binding first::

    program     := statement {";" statement}          trailing ";" optional
    statement   := "print" expr
                 | "let" IDENT ":=" expr
                 | expr
    count       := NUMBER | IDENT | "(" expr ")"
    expr        := "\\" lambda | "if" conditional | equality
    conditional := equality "then" expr "else" expr
    lambda      := IDENT* "->" expr
    equality    := relational [("=" | "!=") relational]
    relational  := addsub [(">" | "<" | ">=" | "<=") addsub]
    addsub      := term {("+" | "-") term}
    term        := factor {("*" | "/") factor}
    factor      := "(" expr ")" | "{" program "}" | "loop" count expr
                 | IDENT arglist | NUMBER
    arglist     := expr*

Equality and relational operators apply at most once per level, so
``a < b < c`` is rejected rather than chained.

An identifier followed by expressions is ambiguous between a reference and
a call. The parser settles it speculatively: it keeps parsing argument
expressions until one fails, then rewinds the cursor to the position before
the failed attempt. No arguments gives a :class:`Reference`, one or more a
:class:`Call`. The token list is never mutated, so rewinding is just
restoring an index. When the program turns out to be malformed, the error
reported is the one that got furthest into the input, which may come from a
rewound argument attempt.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .ast import (
    Assign, Call, Conditional, Lambda, Node, Operation, Reference, Statements, Value,
)
from .errors import LangSyntaxError
from .lexer import Token, TokenKind, tokenize

EQUALITY_OPERATORS = ['=', '!=']
RELATIONAL_OPERATORS = ['>', '<', '>=', '<=']
ADDITIVE_OPERATORS = ['+', '-']
MULTIPLICATIVE_OPERATORS = ['*', '/']


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0
        self.furthest: Optional[LangSyntaxError] = None

    # Token cursor helpers

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.error('unexpected end of input')
        self.pos += 1
        return token

    def match(self, kind: TokenKind, values: Optional[List[str]] = None) -> bool:
        token = self.peek()
        if token is None or token.kind is not kind:
            return False
        return values is None or token.lexeme in values

    def consume(self, kind: TokenKind, values: Optional[List[str]] = None) -> Token:
        token = self.peek()
        if token is None or token.kind is not kind:
            raise self.error(f"should be a {kind.value}", token)
        if values is not None and token.lexeme not in values:
            raise self.error(f"should be one of {', '.join(values)}", token)
        self.pos += 1
        return token

    def end_position(self) -> int:
        if not self.tokens:
            return 0
        last = self.tokens[-1]
        return last.position + len(last.lexeme)

    def error(self, message: str, token: Optional[Token] = None) -> LangSyntaxError:
        if token is None:
            token = self.peek()
        if token is None:
            return LangSyntaxError(f"end of input {message}", self.end_position())
        return LangSyntaxError(f'"{token.lexeme}({token.kind.value})" {message}', token.position)

    # Statements

    def parse(self) -> Statements:
        """Parse the whole token list as one program."""
        try:
            program = self.parse_statements(0)
            if not self.at_end():
                self.consume(TokenKind.SYMBOL, [';'])
        except LangSyntaxError as e:
            self.remember(e)
            raise self.furthest from None
        return program

    def remember(self, error: LangSyntaxError):
        if self.furthest is None or error.position >= self.furthest.position:
            self.furthest = error

    def parse_statements(self, position: int) -> Statements:
        statements: List[Node] = []
        first = self.peek()
        if first is not None and not self.match(TokenKind.PAREN, ['}']):
            position = first.position
        while not self.at_end() and not self.match(TokenKind.PAREN, ['}']):
            statements.append(self.parse_statement())
            if self.match(TokenKind.SYMBOL, [';']):
                self.advance()
            else:
                break
        return Statements(position, statements)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token is not None and token.kind is TokenKind.IDENT:
            if token.lexeme == 'print':
                self.advance()
                expr = self.parse_expression()
                return Call(token.position, 'print', [expr])
            if token.lexeme == 'let':
                return self.parse_let()
        if self.match(TokenKind.KEYWORD, ['let']):
            return self.parse_let()
        return self.parse_expression()

    def parse_let(self) -> Assign:
        # 'let' arrives as a KEYWORD from the lexer, or as an IDENT from
        # hand-built token lists; both produce the same node.
        self.advance()
        name = self.consume(TokenKind.IDENT)
        self.consume(TokenKind.OPERATOR, [':='])
        expr = self.parse_expression()
        return Assign(name.position, name.lexeme, expr)

    def parse_loop(self) -> Statements:
        keyword = self.advance()
        count = self.parse_loop_count()
        body = self.parse_expression()
        return Statements(keyword.position, [count, body], 'loop')

    def parse_loop_count(self) -> Node:
        if self.match(TokenKind.IDENT):
            ident = self.advance()
            return Reference(ident.position, ident.lexeme)
        if self.match(TokenKind.PAREN, ['(']):
            return self.parse_group()
        return self.parse_number()

    # Expressions

    def parse_expression(self) -> Node:
        if self.match(TokenKind.SYMBOL, ['\\']):
            return self.parse_lambda()
        if self.match(TokenKind.KEYWORD, ['if']):
            return self.parse_conditional()
        return self.parse_equality()

    def parse_conditional(self) -> Conditional:
        self.consume(TokenKind.KEYWORD, ['if'])
        condition = self.parse_equality()
        self.consume(TokenKind.KEYWORD, ['then'])
        then_branch = self.parse_expression()
        self.consume(TokenKind.KEYWORD, ['else'])
        else_branch = self.parse_expression()
        return Conditional(condition.position, condition, then_branch, else_branch)

    def parse_lambda(self) -> Lambda:
        backslash = self.consume(TokenKind.SYMBOL, ['\\'])
        params: List[str] = []
        while self.match(TokenKind.IDENT):
            params.append(self.advance().lexeme)
        self.consume(TokenKind.OPERATOR, ['->'])
        body = self.parse_expression()
        return Lambda(backslash.position, params, body)

    def parse_equality(self) -> Node:
        node = self.parse_relational()
        if self.match(TokenKind.OPERATOR, EQUALITY_OPERATORS):
            op_token = self.advance()
            right = self.parse_relational()
            node = Operation(op_token.position, op_token.lexeme, node, right)
        return node

    def parse_relational(self) -> Node:
        node = self.parse_addsub()
        if self.match(TokenKind.OPERATOR, RELATIONAL_OPERATORS):
            op_token = self.advance()
            right = self.parse_addsub()
            node = Operation(op_token.position, op_token.lexeme, node, right)
        return node

    def parse_addsub(self) -> Node:
        node = self.parse_term()
        while self.match(TokenKind.OPERATOR, ADDITIVE_OPERATORS):
            op_token = self.advance()
            right = self.parse_term()
            node = Operation(op_token.position, op_token.lexeme, node, right)
        return node

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while self.match(TokenKind.OPERATOR, MULTIPLICATIVE_OPERATORS):
            op_token = self.advance()
            right = self.parse_factor()
            node = Operation(op_token.position, op_token.lexeme, node, right)
        return node

    def parse_factor(self) -> Node:
        if self.match(TokenKind.PAREN, ['(']):
            return self.parse_group()
        if self.match(TokenKind.KEYWORD, ['loop']):
            return self.parse_loop()
        if self.match(TokenKind.PAREN, ['{']):
            brace = self.advance()
            block = self.parse_statements(brace.position)
            self.consume(TokenKind.PAREN, ['}'])
            return block
        if self.match(TokenKind.IDENT):
            ident = self.advance()
            args = self.parse_arguments()
            if not args:
                return Reference(ident.position, ident.lexeme)
            return Call(ident.position, ident.lexeme, args)
        return self.parse_number()

    def parse_group(self) -> Node:
        self.consume(TokenKind.PAREN, ['('])
        expr = self.parse_expression()
        self.consume(TokenKind.PAREN, [')'])
        return expr

    def parse_arguments(self) -> List[Node]:
        """Greedily collect argument expressions, rewinding the failed attempt."""
        args: List[Node] = []
        while not self.at_end() and not self.match(TokenKind.SYMBOL, [';']):
            checkpoint = self.pos
            try:
                args.append(self.parse_expression())
            except LangSyntaxError as e:
                self.remember(e)
                self.pos = checkpoint
                break
        return args

    def parse_number(self) -> Value:
        token = self.consume(TokenKind.NUMBER)
        return Value(token.position, int(token.lexeme))


def parse(tokens: Sequence[Token]) -> Statements:
    """Parse a token sequence into a single :class:`Statements` root."""
    return Parser(tokens).parse()


def parse_program(source: str) -> Statements:
    """Tokenize and parse letlang source text."""
    return parse(tokenize(source))
