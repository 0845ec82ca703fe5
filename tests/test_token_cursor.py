from __future__ import annotations

import unittest

from apl_jax.cursor import TokenCursor
from apl_jax.errors import ParseError
from apl_jax.lexer import Lexer, TokenKind


class TokenCursorTests(unittest.TestCase):
    def _cursor(self, source: str, capacity: int = 10) -> TokenCursor:
        return TokenCursor(Lexer(source), capacity=capacity)

    def test_next_skip_space_skips_one_space_token(self) -> None:
        cursor = self._cursor("a   + 1")
        self.assertEqual(cursor.next_skip_space().text, "a")
        self.assertEqual(cursor.next_skip_space().text, "+")
        self.assertEqual(cursor.next_skip_space().text, "1")
        self.assertEqual(cursor.next_skip_space().kind, TokenKind.EOF)

    def test_retract_replays_last_token(self) -> None:
        cursor = self._cursor("a = 1")
        first = cursor.next()
        cursor.retract()
        self.assertEqual(cursor.pending, 1)
        self.assertIs(cursor.next(), first)
        self.assertEqual(cursor.pending, 0)
        self.assertEqual(cursor.next().kind, TokenKind.SPACE)

    def test_multiple_retractions_replay_in_scan_order(self) -> None:
        cursor = self._cursor("1 2 3")
        scanned = [cursor.next() for _ in range(3)]
        for _ in range(3):
            cursor.retract()
        replayed = [cursor.next() for _ in range(3)]
        self.assertEqual(replayed, scanned)
        self.assertEqual(cursor.next().text, " ")

    def test_retract_without_history_is_an_error(self) -> None:
        cursor = self._cursor("1")
        with self.assertRaises(ParseError):
            cursor.retract()

    def test_retract_beyond_capacity_is_an_error(self) -> None:
        cursor = self._cursor("a b c d e", capacity=3)
        for _ in range(6):
            cursor.next()
        cursor.retract()
        cursor.retract()
        cursor.retract()
        with self.assertRaisesRegex(ParseError, "Retraction buffer exhausted"):
            cursor.retract()

    def test_history_evicts_oldest_entry(self) -> None:
        cursor = self._cursor("a b c", capacity=2)
        tokens = [cursor.next() for _ in range(5)]
        cursor.retract()
        cursor.retract()
        self.assertEqual([cursor.next(), cursor.next()], tokens[-2:])

    def test_capacity_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            self._cursor("1", capacity=0)


if __name__ == "__main__":
    unittest.main()
