"""Parser for one line of the integer/vector expression language.

Grammar (every binary operator has the same precedence and chains left to
right)::

    line           := assignment | operator_chain
    assignment     := IDENTIFIER ASSIGN (signed_number | IDENTIFIER) EOF
    operator_chain := term (OPERATOR term | REDUCE_SCAN)* EOF
    term           := vector_literal | IDENTIFIER | REDUCE_SCAN term
    vector_literal := signed_number signed_number*
    signed_number  := ["-" with no space before the digits] NUMBER

A binary minus needs whitespace after it: `1 -2` is a two-item vector and
`1 - 2` is a subtraction.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import NoReturn

from .ast import Assignment, Binary, Expr, Literal, Unary, VariableRef
from .cursor import TokenCursor
from .errors import LexError, ParseError, UndefinedVariableError
from .lexer import Lexer, Token, TokenKind
from .operations import BINARY_OPERATORS, UNARY_OPERATORS
from .values import Int, Value, Vector, in_int64_range

_TERM_START = ("NUMBER", "IDENTIFIER", "-", *sorted(UNARY_OPERATORS))


class Parser:
    def __init__(self, source: str | TokenCursor, env: Mapping[str, Value] | None = None) -> None:
        if isinstance(source, str):
            source = TokenCursor(Lexer(source))
        self.cursor = source
        self.env: Mapping[str, Value] = {} if env is None else env

    def parse(self) -> Expr:
        tok = self.cursor.next_skip_space()
        if tok.kind is TokenKind.EOF:
            self._error(tok, message="Empty line")

        if tok.kind is TokenKind.IDENTIFIER:
            follow = self.cursor.next_skip_space()
            if follow.kind is TokenKind.ASSIGN:
                return self._parse_assignment(tok)
            self.cursor.retract()
            left = self._identifier_term(tok)
        else:
            left = self._parse_term(tok)

        expr = self._parse_chain(left)
        self._expect_end()
        return expr

    def _error(self, tok: Token, *, message: str = "Unexpected token", expected: tuple[str, ...] = ()) -> NoReturn:
        if tok.kind is TokenKind.ERROR:
            raise LexError(tok.text, tok.pos, tok.end)
        if tok.kind is TokenKind.EOF:
            found = "EOF"
        else:
            found = f"{tok.kind.value}({tok.text})"
        raise ParseError(message, tok.pos, tok.end, expected=tuple(dict.fromkeys(expected)), found=found)

    def _expect_end(self) -> None:
        tok = self.cursor.next_skip_space()
        if tok.kind is TokenKind.EOF:
            return
        if tok.kind is TokenKind.ASSIGN:
            self._error(tok, message="Assignment target must be an identifier")
        self._error(tok, expected=("OPERATOR", "EOF"))

    def _parse_assignment(self, target: Token) -> Assignment:
        tok = self.cursor.next_skip_space()
        if tok.kind is TokenKind.IDENTIFIER:
            value: Expr = self._identifier_term(tok)
        elif tok.kind is TokenKind.NUMBER:
            value = Literal(self._number(tok))
        elif tok.kind is TokenKind.OPERATOR and tok.text == "-":
            value = Literal(self._negative_number())
        else:
            self._error(tok, message="Assignment value must be a number or a variable", expected=("NUMBER", "IDENTIFIER"))
        self._expect_end()
        return Assignment(name=target.text, value=value)

    def _parse_term(self, tok: Token) -> Expr:
        if tok.kind is TokenKind.NUMBER:
            return self._parse_vector_literal(self._number(tok))
        if tok.kind is TokenKind.IDENTIFIER:
            return self._identifier_term(tok)
        if tok.kind is TokenKind.OPERATOR:
            if tok.text == "-":
                return self._parse_vector_literal(self._negative_number())
            if tok.text in UNARY_OPERATORS:
                operand = self._parse_term(self.cursor.next_skip_space())
                return Unary(op=tok.text, operand=operand)
        self._error(tok, message="Expected a term", expected=_TERM_START)

    def _parse_vector_literal(self, first: Int) -> Expr:
        items = [first]
        while True:
            tok = self.cursor.next_skip_space()
            if tok.kind is TokenKind.NUMBER:
                items.append(self._number(tok))
                continue
            if tok.kind is TokenKind.OPERATOR and tok.text == "-":
                adjacent = self.cursor.next()
                if adjacent.kind is TokenKind.NUMBER:
                    items.append(self._number(adjacent, negative=True))
                    continue
                # Binary minus: replay both the operator and what followed it.
                self.cursor.retract()
            self.cursor.retract()
            break
        if len(items) == 1:
            return Literal(first)
        return Literal(Vector(tuple(items)))

    def _parse_chain(self, left: Expr) -> Expr:
        while True:
            tok = self.cursor.next_skip_space()
            if tok.kind is not TokenKind.OPERATOR:
                self.cursor.retract()
                return left
            if tok.text in UNARY_OPERATORS:
                # Mid-chain reduce/scan applies to everything accumulated so far.
                left = Unary(op=tok.text, operand=left)
            elif tok.text in BINARY_OPERATORS:
                right = self._parse_term(self.cursor.next_skip_space())
                left = Binary(op=tok.text, left=left, right=right)
            else:
                self._error(tok, message=f"Unknown operator {tok.text!r}")

    def _identifier_term(self, tok: Token) -> VariableRef:
        if tok.text not in self.env:
            raise UndefinedVariableError(tok.text)
        return VariableRef(name=tok.text)

    def _negative_number(self) -> Int:
        tok = self.cursor.next()
        if tok.kind is not TokenKind.NUMBER:
            self._error(tok, message="Dangling minus", expected=("NUMBER",))
        return self._number(tok, negative=True)

    def _number(self, tok: Token, *, negative: bool = False) -> Int:
        # Over 19 significant digits never fits in int64; int() would also
        # refuse very long digit strings with a plain ValueError.
        if len(tok.text.lstrip("0")) > 19:
            self._error(tok, message="Number literal out of range")
        value = int(tok.text)
        if negative:
            value = -value
        if not in_int64_range(value):
            self._error(tok, message="Number literal out of range")
        return Int(value)


def parse(source: str, env: Mapping[str, Value] | None = None) -> Expr:
    """Parse one line into an expression, checking variable references against ``env``."""
    return Parser(source, env).parse()
