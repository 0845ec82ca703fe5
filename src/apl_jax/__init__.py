"""apl-jax public API."""

from .ast import Assignment, Binary, Expr, Literal, Unary, VariableRef
from .cursor import TokenCursor
from .environment import Environment
from .errors import (
    AplError,
    AplRuntimeError,
    LexError,
    ParseError,
    UndefinedVariableError,
    UnsupportedOperationError,
)
from .evaluator import Interpreter, evaluate, evaluate_line
from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import Parser, parse
from .values import Int, Value, Vector, format_value

__all__ = [
    "evaluate_line",
    "evaluate",
    "Interpreter",
    "Environment",
    "parse",
    "Parser",
    "tokenize",
    "Lexer",
    "Token",
    "TokenKind",
    "TokenCursor",
    "Int",
    "Vector",
    "Value",
    "format_value",
    "Expr",
    "Literal",
    "VariableRef",
    "Assignment",
    "Unary",
    "Binary",
    "AplError",
    "AplRuntimeError",
    "LexError",
    "ParseError",
    "UndefinedVariableError",
    "UnsupportedOperationError",
]
