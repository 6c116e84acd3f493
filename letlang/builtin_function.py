from dataclasses import dataclass
from typing import Any, Callable, List


@dataclass
class BuiltinFunction:
    name: str
    arity: int
    fn: Callable[[List[Any]], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
