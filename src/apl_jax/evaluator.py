"""Evaluator for parsed lines on top of the JAX operator kernels."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Final

from .ast import Assignment, Binary, Expr, Literal, Unary, VariableRef
from .environment import Environment
from .errors import UnsupportedOperationError
from .operations import add, maximum, minimum, multiply, power, product_reduce, product_scan, subtract, sum_reduce, sum_scan
from .parser import parse
from .values import Value, validate_value

_UNARY_DISPATCH: Final[dict[str, Callable[[Value], Value]]] = {
    "+/": sum_reduce,
    "+\\": sum_scan,
    "*/": product_reduce,
    "*\\": product_scan,
}

_BINARY_DISPATCH: Final[dict[str, Callable[[Value, Value], Value]]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "**": power,
    "min": minimum,
    "max": maximum,
}


def evaluate(expr: Expr, env: Environment) -> Value:
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, VariableRef):
        return env.lookup(expr.name)

    if isinstance(expr, Assignment):
        # Resolve the right side completely before the write is committed.
        value = evaluate(expr.value, env)
        return env.assign(expr.name, value)

    if isinstance(expr, Unary):
        fn = _UNARY_DISPATCH.get(expr.op)
        if fn is None:
            raise UnsupportedOperationError(f"Unknown unary operator {expr.op!r}")
        return fn(evaluate(expr.operand, env))

    if isinstance(expr, Binary):
        fn = _BINARY_DISPATCH.get(expr.op)
        if fn is None:
            raise UnsupportedOperationError(f"Unknown binary operator {expr.op!r}")
        left = evaluate(expr.left, env)
        right = evaluate(expr.right, env)
        return fn(left, right)

    raise TypeError(f"Unsupported expression node {type(expr).__name__}")


def evaluate_line(source: str, env: Environment) -> Value:
    """Parse and evaluate one line of input against ``env``."""
    result = evaluate(parse(source, env), env)
    validate_value(result, where="line result")
    return result


@dataclass
class Interpreter:
    """Owns an environment and evaluates lines against it one at a time."""

    env: Environment = field(default_factory=Environment)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    def evaluate_line(self, source: str) -> Value:
        with self._lock:
            return evaluate_line(source, self.env)

    def __call__(self, source: str) -> Value:
        return self.evaluate_line(source)
