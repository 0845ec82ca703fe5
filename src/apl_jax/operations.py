"""Element-wise and whole-vector integer operators on top of JAX."""

from __future__ import annotations

import logging
import os
from typing import Callable, Final

import jax
import jax.numpy as jnp

from .errors import UnsupportedOperationError
from .values import Int, Value, Vector, kind_of

logger = logging.getLogger("apl_jax.operations")

_USE_X64: Final[bool] = os.environ.get("APL_JAX_DISABLE_X64", "0") != "1"
_USE_JITTED_KERNELS: Final[bool] = os.environ.get("APL_JAX_DISABLE_JITTED_KERNELS", "0") != "1"

if _USE_X64:
    jax.config.update("jax_enable_x64", True)

INT_DTYPE: Final = jnp.int64 if _USE_X64 else jnp.int32
_FLOAT_DTYPE: Final = jnp.float64 if _USE_X64 else jnp.float32


def _truncated_power(w: jnp.ndarray, x: jnp.ndarray) -> jnp.ndarray:
    # Real-valued power truncated toward zero, so 2 ** -1 is 0.
    real = jnp.power(w.astype(_FLOAT_DTYPE), x.astype(_FLOAT_DTYPE))
    return jnp.trunc(real).astype(INT_DTYPE)


_BASE_BINARY_OPS: Final[dict[str, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]]] = {
    "+": lambda w, x: jnp.add(w, x),
    "-": lambda w, x: jnp.subtract(w, x),
    "*": lambda w, x: jnp.multiply(w, x),
    "**": _truncated_power,
    "min": lambda w, x: jnp.minimum(w, x),
    "max": lambda w, x: jnp.maximum(w, x),
}

_BASE_UNARY_OPS: Final[dict[str, Callable[[jnp.ndarray], jnp.ndarray]]] = {
    "+/": lambda x: jnp.sum(x, dtype=INT_DTYPE),
    "+\\": lambda x: jnp.cumsum(x, dtype=INT_DTYPE),
    "*/": lambda x: jnp.prod(x, dtype=INT_DTYPE),
    "*\\": lambda x: jnp.cumprod(x, dtype=INT_DTYPE),
}

BINARY_OPERATORS: Final[frozenset[str]] = frozenset(_BASE_BINARY_OPS)
UNARY_OPERATORS: Final[frozenset[str]] = frozenset(_BASE_UNARY_OPS)

_JITTED_BINARY_OPS: dict[str, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]] = {}
_JITTED_UNARY_OPS: dict[str, Callable[[jnp.ndarray], jnp.ndarray]] = {}


def _binary_kernel(op: str) -> Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]:
    base = _BASE_BINARY_OPS.get(op)
    if base is None:
        raise UnsupportedOperationError(f"Unknown binary operator {op!r}")
    if not _USE_JITTED_KERNELS:
        return base
    fn = _JITTED_BINARY_OPS.get(op)
    if fn is None:
        logger.debug("jitting binary kernel %r", op)
        fn = jax.jit(base)
        _JITTED_BINARY_OPS[op] = fn
    return fn


def _unary_kernel(op: str) -> Callable[[jnp.ndarray], jnp.ndarray]:
    base = _BASE_UNARY_OPS.get(op)
    if base is None:
        raise UnsupportedOperationError(f"Unknown unary operator {op!r}")
    if not _USE_JITTED_KERNELS:
        return base
    fn = _JITTED_UNARY_OPS.get(op)
    if fn is None:
        logger.debug("jitting unary kernel %r", op)
        fn = jax.jit(base)
        _JITTED_UNARY_OPS[op] = fn
    return fn


def as_jax_array(value: Value) -> jnp.ndarray:
    if isinstance(value, Int):
        raw: int | list[int] = value.value
    else:
        raw = [item.value for item in value.items]
    try:
        return jnp.asarray(raw, dtype=INT_DTYPE)
    except OverflowError as exc:
        raise UnsupportedOperationError(f"Value {raw!r} does not fit in {jnp.dtype(INT_DTYPE).name}") from exc


def from_jax_array(arr: jnp.ndarray) -> Value:
    if arr.ndim == 0:
        return Int(int(arr))
    if arr.ndim == 1:
        return Vector(tuple(Int(int(item)) for item in arr.tolist()))
    raise UnsupportedOperationError(f"Result of rank {arr.ndim} cannot be represented")


def apply_binary(op: str, left: Value, right: Value) -> Value:
    """Apply ``op`` to two scalars or element-wise to two equal-length vectors."""
    kernel = _binary_kernel(op)
    if isinstance(left, Int) and isinstance(right, Int):
        return from_jax_array(kernel(as_jax_array(left), as_jax_array(right)))
    if isinstance(left, Vector) and isinstance(right, Vector):
        if len(left) != len(right):
            raise UnsupportedOperationError(
                f"Length mismatch for {op!r}: {len(left)} and {len(right)}"
            )
        return from_jax_array(kernel(as_jax_array(left), as_jax_array(right)))
    raise UnsupportedOperationError(
        f"Operator {op!r} does not support {kind_of(left).value} and {kind_of(right).value} operands"
    )


def apply_unary(op: str, value: Value) -> Value:
    """Reduce or scan a vector; a scalar operand is returned unchanged."""
    kernel = _unary_kernel(op)
    if isinstance(value, Int):
        return value
    if isinstance(value, Vector):
        return from_jax_array(kernel(as_jax_array(value)))
    raise UnsupportedOperationError(f"Operator {op!r} does not support {type(value).__name__} operands")


def add(left: Value, right: Value) -> Value:
    return apply_binary("+", left, right)


def subtract(left: Value, right: Value) -> Value:
    return apply_binary("-", left, right)


def multiply(left: Value, right: Value) -> Value:
    return apply_binary("*", left, right)


def power(left: Value, right: Value) -> Value:
    return apply_binary("**", left, right)


def minimum(left: Value, right: Value) -> Value:
    return apply_binary("min", left, right)


def maximum(left: Value, right: Value) -> Value:
    return apply_binary("max", left, right)


def sum_reduce(value: Value) -> Value:
    return apply_unary("+/", value)


def sum_scan(value: Value) -> Value:
    return apply_unary("+\\", value)


def product_reduce(value: Value) -> Value:
    return apply_unary("*/", value)


def product_scan(value: Value) -> Value:
    return apply_unary("*\\", value)
