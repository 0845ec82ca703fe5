"""Structured error types for lexer/parser/runtime separation."""

from __future__ import annotations


class AplError(Exception):
    """Base class for structured apl-jax errors."""


class LexError(AplError):
    """Unrecognized character reached the parser as an ERROR token."""

    def __init__(self, char: str, start: int, end: int) -> None:
        super().__init__(f"Unexpected character {char!r}")
        self.char = char
        self.start = start
        self.end = end

    def __str__(self) -> str:
        return f"Unexpected character {self.char!r} at span [{self.start}, {self.end})"


class ParseError(AplError):
    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


class AplRuntimeError(AplError):
    """Generic failure after a successful parse."""


class UndefinedVariableError(AplRuntimeError):
    """Reference to a name that is not bound in the environment."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable {name!r}")
        self.name = name


class UnsupportedOperationError(AplRuntimeError):
    """Operator applied to incompatible operand shapes, or an unknown operator."""
