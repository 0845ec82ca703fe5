"""Token cursor with a bounded retraction buffer over the lexer."""

from __future__ import annotations

import logging
import os
from collections import deque
from typing import Final

from .errors import ParseError
from .lexer import Lexer, Token, TokenKind

logger = logging.getLogger("apl_jax.cursor")

DEFAULT_HISTORY_CAPACITY: Final[int] = max(1, int(os.environ.get("APL_JAX_HISTORY_CAPACITY", "10")))


class TokenCursor:
    """Replays up to ``capacity`` already-scanned tokens on request.

    Retracted tokens come back in the order they were first scanned, so
    retracting twice and calling ``next()`` twice reproduces the scanned
    stream.
    """

    def __init__(self, lexer: Lexer, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("TokenCursor capacity must be at least 1")
        self.lexer = lexer
        self.capacity = capacity
        self._history: deque[Token] = deque(maxlen=capacity)
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    def next(self) -> Token:
        if self._pending:
            tok = self._history[len(self._history) - self._pending]
            self._pending -= 1
            return tok
        tok = self.lexer.scan()
        self._history.append(tok)
        return tok

    def retract(self) -> None:
        if self._pending >= len(self._history):
            pos = self._history[0].pos if self._history else 0
            logger.debug("retraction refused: %d of %d tokens pending", self._pending, self.capacity)
            raise ParseError(
                f"Retraction buffer exhausted (capacity {self.capacity})",
                pos,
                pos,
            )
        self._pending += 1

    def next_skip_space(self) -> Token:
        tok = self.next()
        if tok.kind is TokenKind.SPACE:
            tok = self.next()
        return tok
