from typing import Dict, List

from letlang.ast import Node
from letlang.errors import UnboundVariable


class Memory:
    """Stack of variable frames mapping names to AST nodes.

    ``begin_scope`` pushes a copy of the current frame, not a link to it, so
    frames on the stack are snapshots of their defining scope.
    """
    def __init__(self):
        self.frames: List[Dict[str, Node]] = []
        self.current: Dict[str, Node] = {}

    @property
    def depth(self) -> int:
        return len(self.frames)

    def begin_scope(self):
        self.frames.append(dict(self.current))
        self.current = {}

    def end_scope(self):
        self.current = self.frames.pop()

    def assign(self, name: str, node: Node):
        self.current[name] = node

    def fetch(self, name: str, position: int = 0) -> Node:
        if name in self.current:
            return self.current[name]
        for frame in reversed(self.frames):
            if name in frame:
                return frame[name]
        raise UnboundVariable(name, position)
