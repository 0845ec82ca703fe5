from __future__ import annotations

import threading
import unittest

from apl_jax import Environment, Interpreter, evaluate, evaluate_line
from apl_jax.ast import Binary, Literal, VariableRef
from apl_jax.errors import AplError, ParseError, UndefinedVariableError, UnsupportedOperationError
from apl_jax.values import Int, Vector


class EvaluateLineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.env = Environment()

    def _eval(self, source: str):
        return evaluate_line(source, self.env)

    def test_assignment_then_lookup(self) -> None:
        self.assertEqual(self._eval("x = 5"), Int(5))
        self.assertEqual(self._eval("x"), Int(5))
        self.assertEqual(self.env["x"], Int(5))

    def test_assignment_from_variable_and_rebinding(self) -> None:
        self._eval("b = 42")
        self.assertEqual(self._eval("a = b"), Int(42))
        self._eval("b = -1")
        self.assertEqual(self._eval("b"), Int(-1))
        self.assertEqual(self._eval("a"), Int(42))

    def test_addition_commutes_for_bound_integers(self) -> None:
        for a, b in [(0, 0), (3, 4), (-7, 2), (123456789, -987654321)]:
            with self.subTest(a=a, b=b):
                self._eval(f"a = {a}")
                self._eval(f"b = {b}")
                self.assertEqual(self._eval("a + b"), self._eval("b + a"))
                self.assertEqual(self._eval("a + b"), Int(a + b))

    def test_vector_broadcast(self) -> None:
        self.assertEqual(self._eval("1 2 3 4 + 1 2 3 4"), Vector.of(2, 4, 6, 8))

    def test_reduce_and_scan(self) -> None:
        self.assertEqual(self._eval("+/ 1 2 3 4"), Int(10))
        self.assertEqual(self._eval("+\\ 1 2 3 4"), Vector.of(1, 3, 6, 10))
        self.assertEqual(self._eval("*/ 1 2 3 4"), Int(24))
        self.assertEqual(self._eval("*\\ 1 2 3 4"), Vector.of(1, 2, 6, 24))

    def test_chained_left_associativity(self) -> None:
        self._eval("a = 1")
        self.assertEqual(self._eval("a + a - a + a"), Int(2))
        self.assertEqual(self._eval("a + a + a + a"), Int(4))
        self.assertEqual(self._eval("10 - 2 - 3"), Int(5))
        self.assertEqual(self._eval("2 + 3 * 4"), Int(20))

    def test_min_max_and_power_lines(self) -> None:
        self.assertEqual(self._eval("3 min 5"), Int(3))
        self.assertEqual(self._eval("3 max 5"), Int(5))
        self.assertEqual(self._eval("1 5 3 max 4 2 6"), Vector.of(4, 5, 6))
        self.assertEqual(self._eval("2 ** 3 ** 2"), Int(64))

    def test_negative_literal_adjacency(self) -> None:
        self.assertEqual(self._eval("-1 + 2"), Int(1))
        with self.assertRaises(ParseError):
            self._eval("- 1")

    def test_signed_vector_elements(self) -> None:
        self.assertEqual(self._eval("1 -2 3"), Vector.of(1, -2, 3))
        self.assertEqual(self._eval("1 -2 3 + 1 1 1"), Vector.of(2, -1, 4))
        self.assertEqual(self._eval("1 2 3 - 1 1 1"), Vector.of(0, 1, 2))
        self.assertEqual(self._eval("+/ 5 -5 2"), Int(2))

    def test_overlong_number_literal(self) -> None:
        with self.assertRaises(ParseError):
            self._eval("9" * 5000)

    def test_undefined_variable(self) -> None:
        with self.assertRaises(UndefinedVariableError):
            self._eval("c")

    def test_assignment_target_must_be_identifier(self) -> None:
        with self.assertRaises(ParseError):
            self._eval("2 = 2")

    def test_repeated_lookup_is_idempotent(self) -> None:
        self._eval("x = 7")
        first = self._eval("x")
        second = self._eval("x")
        self.assertEqual(first, second)
        self.assertEqual(dict(self.env), {"x": Int(7)})

    def test_mid_chain_reduce(self) -> None:
        self.assertEqual(self._eval("1 2 3 + 1 1 1 +/"), Int(9))
        self.assertEqual(self._eval("1 2 3 +\\ * 2 2 2"), Vector.of(2, 6, 12))
        self.assertEqual(self._eval("10 - +/ 1 2 3"), Int(4))

    def test_shape_errors_are_reported(self) -> None:
        with self.assertRaises(UnsupportedOperationError):
            self._eval("1 2 3 + 1 2")
        with self.assertRaises(UnsupportedOperationError):
            self._eval("1 + 1 2")
        with self.assertRaises(UnsupportedOperationError):
            self._eval("+/ 1 2 + 1 2")

    def test_failed_assignment_leaves_environment_unchanged(self) -> None:
        self._eval("x = 1")
        for source in ("x = 2 + 3", "x = nope", "x = 2 #", "y = 4 4"):
            with self.subTest(source=source):
                with self.assertRaises(AplError):
                    self._eval(source)
        self.assertEqual(dict(self.env), {"x": Int(1)})

    def test_evaluate_reads_environment_at_evaluation_time(self) -> None:
        expr = Binary("+", VariableRef("x"), Literal(Int(1)))
        self.env["x"] = Int(1)
        self.assertEqual(evaluate(expr, self.env), Int(2))
        self.env["x"] = Int(10)
        self.assertEqual(evaluate(expr, self.env), Int(11))
        del self.env["x"]
        with self.assertRaises(UndefinedVariableError):
            evaluate(expr, self.env)

    def test_unknown_operator_in_tree(self) -> None:
        with self.assertRaises(UnsupportedOperationError):
            evaluate(Binary("/", Literal(Int(1)), Literal(Int(2))), self.env)

    def test_unknown_node_type(self) -> None:
        with self.assertRaises(TypeError):
            evaluate(object(), self.env)  # type: ignore[arg-type]

    def test_wraparound_on_overflow(self) -> None:
        self.assertEqual(self._eval("9223372036854775807 + 1"), Int(-(2**63)))


class InterpreterTests(unittest.TestCase):
    def test_interpreter_owns_environment(self) -> None:
        interp = Interpreter()
        self.assertEqual(interp("x = 3"), Int(3))
        self.assertEqual(interp.evaluate_line("x * x"), Int(9))
        self.assertEqual(interp.env["x"], Int(3))

    def test_separate_interpreters_do_not_share_bindings(self) -> None:
        first = Interpreter()
        second = Interpreter()
        first("x = 1")
        with self.assertRaises(UndefinedVariableError):
            second("x")

    def test_interpreter_accepts_existing_environment(self) -> None:
        env = Environment({"v": Vector.of(1, 2)})
        interp = Interpreter(env)
        self.assertEqual(interp("v + v"), Vector.of(2, 4))
        interp("w = 5")
        self.assertEqual(env["w"], Int(5))

    def test_concurrent_callers_are_serialized(self) -> None:
        interp = Interpreter()
        interp("x = 0")
        errors: list[BaseException] = []

        def worker(n: int) -> None:
            try:
                for _ in range(5):
                    interp(f"x = {n}")
                    interp("x + 1")
            except BaseException as exc:  # pragma: no cover - surfaced below
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(errors, [])
        self.assertIn(interp.env["x"], [Int(n) for n in range(4)])


if __name__ == "__main__":
    unittest.main()
