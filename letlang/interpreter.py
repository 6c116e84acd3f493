"""Tree-walking interpreter for letlang.

The :class:`Interpreter` owns the scoped :class:`~letlang.memory.Memory` and
reduces AST nodes to runtime values. It is an explicit context object: state
survives between :meth:`Interpreter.run` calls on the same instance and is
never shared between instances.

Variables are bound to nodes, not values. Reading a variable evaluates the
bound node again, so an expression with side effects repeats them on every
read. A lambda is bound unevaluated and becomes a
:class:`~letlang.types.FunctionValue` when called. Function bodies run in a
fresh frame pushed on top of the caller's frames, so free variables resolve
against the scopes active at call time.
"""

from __future__ import annotations

import operator
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from .ast import (
    Assign, Call, Conditional, Lambda, Node, Operation, Reference, Statements, Value,
)
from .builtin_function import BuiltinFunction
from .errors import (
    ArityMismatch, DivisionByZero, NotCallable, NumericOverflow, TypeMismatch, UnexpectedNode,
    UnknownOperator,
)
from .lexer import tokenize
from .memory import Memory
from .parser import parse
from .types import FunctionValue, RuntimeValue, is_number, is_truthy, to_string, type_name

ARITHMETIC: Dict[str, Callable[[Any, Any], Any]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
}

COMPARISON: Dict[str, Callable[[Any, Any], bool]] = {
    '>': operator.gt,
    '<': operator.lt,
    '>=': operator.ge,
    '<=': operator.le,
    '=': operator.eq,
    '!=': operator.ne,
}

LOOP = 'loop'

# each letlang call nests a handful of Python frames
RECURSION_LIMIT = 10000


def raise_recursion_limit(limit: int = RECURSION_LIMIT):
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)


class Interpreter:
    """Core interpreter that evaluates letlang ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt',
                 output: Optional[TextIO] = None):
        self.memory = Memory()
        self.output = output
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.builtins: Dict[str, BuiltinFunction] = {}
        self.load_builtins()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                if not self.debug_fp.closed:
                    self.debug_fp.write(msg + '\n')
                    self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()

    def load_builtins(self):
        def std_print(args: List[Any]) -> str:
            text = to_string(args[0])
            print(text, file=self.output)
            return text

        self.builtins['print'] = BuiltinFunction('print', 1, std_print)

    # Public API
    def run(self, program: Node) -> RuntimeValue:
        return self.evaluate(program)

    def evaluate(self, node: Node) -> RuntimeValue:
        if isinstance(node, Statements):
            if node.mode == LOOP:
                return self.run_loop(node)
            return [self.evaluate(child) for child in node.nodes]
        if isinstance(node, Lambda):
            return FunctionValue(list(node.params), node.body)
        if isinstance(node, Assign):
            if isinstance(node.expr, Lambda):
                self.memory.assign(node.name, node.expr)
                if self.debug_level >= 2:
                    self.debug(f"assign {node.name} := <fn {' '.join(node.expr.params)}>")
                return 'fn'
            value = self.evaluate(node.expr)
            self.memory.assign(node.name, node.expr)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} := {to_string(value)}")
            return value
        if isinstance(node, Operation):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node, left, right)
        if isinstance(node, Value):
            return node.value
        if isinstance(node, Reference):
            return self.evaluate(self.memory.fetch(node.name, node.position))
        if isinstance(node, Call):
            return self.call_function(node)
        if isinstance(node, Conditional):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.evaluate(node.then_branch)
            return self.evaluate(node.else_branch)
        raise UnexpectedNode(f"Unexpected Node {type(node).__name__}", getattr(node, 'position', 0))

    def run_loop(self, node: Statements) -> List[RuntimeValue]:
        count_node, body = node.nodes
        times = self.evaluate(count_node)
        if isinstance(times, bool) or not isinstance(times, int) or times < 0:
            raise TypeMismatch(
                f"loop count must be a non-negative integer, got {type_name(times)} {to_string(times)}",
                count_node.position,
            )
        if self.debug_level >= 3:
            self.debug(f"loop x{times}")
        return [self.evaluate(body) for _ in range(times)]

    def call_function(self, node: Call) -> RuntimeValue:
        builtin = self.builtins.get(node.name)
        if builtin is not None:
            if len(node.args) != builtin.arity:
                raise ArityMismatch(node.name, builtin.arity, len(node.args), node.position)
            args = [self.evaluate(arg) for arg in node.args]
            return builtin.fn(args)

        self.memory.begin_scope()
        if self.debug_level >= 1:
            self.debug(f"call {node.name}/{len(node.args)} (depth {self.memory.depth})")
        try:
            func = self.evaluate(self.memory.fetch(node.name, node.position))
            if not isinstance(func, FunctionValue):
                raise NotCallable(f'"{node.name}" is not a function but a {type_name(func)}', node.position)
            if len(func.params) != len(node.args):
                raise ArityMismatch(node.name, len(func.params), len(node.args), node.position)
            # all actuals are evaluated before any parameter is bound
            actuals = [Value(arg.position, self.evaluate(arg)) for arg in node.args]
            for param, actual in zip(func.params, actuals):
                self.memory.assign(param, actual)
            return self.evaluate(func.body)
        finally:
            self.memory.end_scope()
            if self.debug_level >= 1:
                self.debug(f"return from {node.name} (depth {self.memory.depth})")

    def apply_binary_op(self, node: Operation, a: Any, b: Any) -> RuntimeValue:
        op = node.op
        if op not in ARITHMETIC and op not in COMPARISON:
            raise UnknownOperator(f"Unexpected operator {op}", node.position)
        if not (is_number(a) and is_number(b)):
            raise TypeMismatch(
                f"operator {op} expects numbers, got {type_name(a)} and {type_name(b)}",
                node.position,
            )
        if op in COMPARISON:
            return COMPARISON[op](a, b)
        if op == '/' and b == 0:
            raise DivisionByZero('division by zero', node.position)
        if op == '/' and isinstance(a, int) and isinstance(b, int) and a % b == 0:
            return a // b
        try:
            result = ARITHMETIC[op](a, b)
        except OverflowError:
            raise NumericOverflow(f"result of {op} is too large", node.position) from None
        # keep exact quotients integral
        if op == '/' and result.is_integer():
            return int(result)
        return result


def run_source(source: str, interpreter: Optional[Interpreter] = None) -> RuntimeValue:
    """Tokenize, parse and evaluate ``source``; returns the program's results."""
    raise_recursion_limit()
    if interpreter is None:
        interpreter = Interpreter()
    return interpreter.run(parse(tokenize(source)))


def run_file(file_path: str, debug_level: int = 0) -> RuntimeValue:
    """Run a letlang source file with a fresh interpreter."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return run_source(source, interpreter)
    finally:
        interpreter.close()
