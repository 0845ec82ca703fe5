"""AST nodes for one interpreted line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .values import Value


@dataclass(frozen=True)
class Literal:
    value: Value


@dataclass(frozen=True)
class VariableRef:
    name: str


@dataclass(frozen=True)
class Assignment:
    name: str
    value: "Expr"


@dataclass(frozen=True)
class Unary:
    op: str
    operand: "Expr"


@dataclass(frozen=True)
class Binary:
    op: str
    left: "Expr"
    right: "Expr"


Expr = Union[Literal, VariableRef, Assignment, Unary, Binary]
