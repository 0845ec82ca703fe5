"""Tokenization for the integer/vector expression language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    EOF = "EOF"
    ERROR = "ERROR"
    ASSIGN = "ASSIGN"
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    SPACE = "SPACE"
    IDENTIFIER = "IDENTIFIER"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int
    end: int


_WHITESPACE = {" ", "\t", "\n"}
_RESERVED_WORDS = frozenset({"min", "max"})
# Characters that turn a leading operator into a two-character operator.
_OP_SUFFIXES = {
    "+": {"/", "\\"},
    "*": {"*", "/", "\\"},
}
_SINGLE_OPERATORS = {"-", "/"}


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_continue(ch: str) -> bool:
    return _is_letter(ch) or _is_digit(ch) or ch == "_"


class Lexer:
    """Scans one token at a time from a single line of source text.

    The lexer never raises: characters outside the language come back as
    ERROR tokens and scanning past the end keeps returning EOF.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.index = 0
        self._last_width = 0

    def _read(self) -> str:
        if self.index >= len(self.source):
            self._last_width = 0
            return ""
        ch = self.source[self.index]
        self.index += 1
        self._last_width = 1
        return ch

    def _unread(self) -> None:
        # Only the most recent read can be pushed back.
        self.index -= self._last_width
        self._last_width = 0

    def _scan_while(self, start: int, predicate) -> str:
        while True:
            ch = self._read()
            if not ch:
                break
            if not predicate(ch):
                self._unread()
                break
        return self.source[start : self.index]

    def scan(self) -> Token:
        start = self.index
        ch = self._read()

        if not ch:
            return Token(TokenKind.EOF, "", start, start)

        if ch in _WHITESPACE:
            text = self._scan_while(start, lambda c: c in _WHITESPACE)
            return Token(TokenKind.SPACE, text, start, self.index)

        if _is_letter(ch):
            text = self._scan_while(start, _is_ident_continue)
            if text in _RESERVED_WORDS:
                return Token(TokenKind.OPERATOR, text, start, self.index)
            return Token(TokenKind.IDENTIFIER, text, start, self.index)

        if _is_digit(ch):
            text = self._scan_while(start, _is_digit)
            return Token(TokenKind.NUMBER, text, start, self.index)

        if ch == "=":
            return Token(TokenKind.ASSIGN, ch, start, self.index)

        suffixes = _OP_SUFFIXES.get(ch)
        if suffixes is not None:
            following = self._read()
            if following and following in suffixes:
                return Token(TokenKind.OPERATOR, ch + following, start, self.index)
            if following:
                self._unread()
            return Token(TokenKind.OPERATOR, ch, start, self.index)

        if ch in _SINGLE_OPERATORS:
            return Token(TokenKind.OPERATOR, ch, start, self.index)

        return Token(TokenKind.ERROR, ch, start, self.index)


def tokenize(source: str) -> list[Token]:
    """Scan a whole line, including SPACE tokens, up to and including EOF."""
    lexer = Lexer(source)
    tokens: list[Token] = []
    while True:
        tok = lexer.scan()
        tokens.append(tok)
        if tok.kind is TokenKind.EOF:
            return tokens
