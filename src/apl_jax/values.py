"""Runtime value model: scalar integers and flat integer vectors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Union

INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1


def in_int64_range(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


@dataclass(frozen=True)
class Int:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Int requires a Python int, got {type(self.value).__name__}")
        if not in_int64_range(self.value):
            raise ValueError(f"Int value {self.value} is outside the signed 64-bit range")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Vector:
    """Ordered, non-empty, flat sequence of integers."""

    items: tuple[Int, ...]

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("Vector must contain at least one item")
        for idx, item in enumerate(self.items):
            if not isinstance(item, Int):
                raise TypeError(f"Vector item {idx} must be Int, got {type(item).__name__}")

    @classmethod
    def of(cls, *values: int) -> "Vector":
        return cls(tuple(Int(v) for v in values))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __str__(self) -> str:
        return format_value(self)


Value = Union[Int, Vector]


class ValueKind(str, Enum):
    INT = "int"
    VECTOR = "vector"


def kind_of(value: object) -> ValueKind:
    if isinstance(value, Int):
        return ValueKind.INT
    if isinstance(value, Vector):
        return ValueKind.VECTOR
    raise TypeError(f"unsupported runtime type {type(value).__name__}")


def format_value(value: Value) -> str:
    if isinstance(value, Int):
        return str(value.value)
    return " ".join(str(item.value) for item in value.items)


def validate_value(value: object, *, where: str = "value") -> None:
    if isinstance(value, (Int, Vector)):
        return
    raise TypeError(f"{where} has unsupported runtime type {type(value).__name__}")
