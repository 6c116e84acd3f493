"""Abstract Syntax Tree (AST) definitions for letlang.

The tree is a closed set of node kinds shared by the parser and the
interpreter. Every node records the source offset it was parsed from so
that runtime diagnostics can point back into the program text.

Besides its own fields each node exposes the uniform view used by tooling
such as :mod:`letlang.ast_json`: a ``kind`` tag, a scalar ``payload`` and an
ordered list of ``children``. ``from_parts`` rebuilds a node from that view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, List


@dataclass
class Node:
    """Base class for all AST nodes."""
    position: int

    kind: ClassVar[str] = 'NODE'
    arity: ClassVar[int] = 0

    @property
    def payload(self) -> Any:
        return None

    @property
    def children(self) -> List['Node']:
        return []

    @classmethod
    def from_parts(cls, position: int, payload: Any, children: List['Node']) -> 'Node':
        raise NotImplementedError


@dataclass
class Statements(Node):
    """A program or a ``{ ... }`` block. ``mode == 'loop'`` marks a loop."""
    nodes: List[Node] = field(default_factory=list)
    mode: str = ''

    kind: ClassVar[str] = 'STATEMENTS'
    arity: ClassVar[int] = -1

    @property
    def payload(self) -> Any:
        return self.mode

    @property
    def children(self) -> List[Node]:
        return list(self.nodes)

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, list(children), payload or '')


@dataclass
class Operation(Node):
    op: str
    left: Node
    right: Node

    kind: ClassVar[str] = 'OP'
    arity: ClassVar[int] = 2

    @property
    def payload(self) -> Any:
        return self.op

    @property
    def children(self) -> List[Node]:
        return [self.left, self.right]

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, payload, children[0], children[1])


@dataclass
class Value(Node):
    value: Any

    kind: ClassVar[str] = 'VALUE'

    @property
    def payload(self) -> Any:
        return self.value

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, payload)


@dataclass
class Reference(Node):
    name: str

    kind: ClassVar[str] = 'REF'

    @property
    def payload(self) -> Any:
        return self.name

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, payload)


@dataclass
class Assign(Node):
    name: str
    expr: Node

    kind: ClassVar[str] = 'ASSIGN'
    arity: ClassVar[int] = 1

    @property
    def payload(self) -> Any:
        return self.name

    @property
    def children(self) -> List[Node]:
        return [self.expr]

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, payload, children[0])


@dataclass
class Lambda(Node):
    params: List[str]
    body: Node

    kind: ClassVar[str] = 'LAMBDA'
    arity: ClassVar[int] = 1

    @property
    def payload(self) -> Any:
        return list(self.params)

    @property
    def children(self) -> List[Node]:
        return [self.body]

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, list(payload), children[0])


@dataclass
class Call(Node):
    name: str
    args: List[Node] = field(default_factory=list)

    kind: ClassVar[str] = 'CALL'
    arity: ClassVar[int] = -1

    @property
    def payload(self) -> Any:
        return self.name

    @property
    def children(self) -> List[Node]:
        return list(self.args)

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, payload, list(children))


@dataclass
class Conditional(Node):
    condition: Node
    then_branch: Node
    else_branch: Node

    kind: ClassVar[str] = 'COND'
    arity: ClassVar[int] = 3

    @property
    def children(self) -> List[Node]:
        return [self.condition, self.then_branch, self.else_branch]

    @classmethod
    def from_parts(cls, position, payload, children):
        return cls(position, children[0], children[1], children[2])


NODE_TYPES = {
    cls.kind: cls
    for cls in (Statements, Operation, Value, Reference, Assign, Lambda, Call, Conditional)
}
