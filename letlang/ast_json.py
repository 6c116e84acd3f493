"""JSON serialization/deserialization for letlang ASTs.

Nodes are converted to plain dicts of the form::

    {"kind": "OP", "position": 4, "value": "+", "nodes": [...]}

which ``json.dump`` can write directly. The conversion is a full round-trip
for every node kind produced by the parser.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import NODE_TYPES, Node, Value

SCALARS = (int, float, str, bool)


def ast_to_obj(node: Node) -> Dict[str, Any]:
    if not isinstance(node, Node) or node.kind not in NODE_TYPES:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    payload = node.payload
    if isinstance(node, Value) and payload is not None and not isinstance(payload, SCALARS):
        raise TypeError(f"Unsupported literal for serialization: {type(payload).__name__}")
    return {
        "kind": node.kind,
        "position": node.position,
        "value": payload,
        "nodes": [ast_to_obj(child) for child in node.children],
    }


def ast_from_obj(obj: Any) -> Node:
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    kind = obj.get("kind")
    cls = NODE_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown AST node kind: {kind}")
    children = [ast_from_obj(child) for child in obj.get("nodes") or []]
    if cls.arity >= 0 and len(children) != cls.arity:
        raise ValueError(f"{kind} node expects {cls.arity} children, got {len(children)}")
    return cls.from_parts(int(obj.get("position", 0)), obj.get("value"), children)
