import unittest

from calculator.lang.error import DivisionByZero, UndefinedVariable
from calculator.pure.evaluator import Environment, Evaluator, truncated_divmod
from calculator.pure.parser import parse_statement
from calculator.pure.syntax import Expression, Identifier


class TruncatedDivmodTestCase(unittest.TestCase):

    def test_truncated_divmod(self):
        cases = {
            (7, 2): (3, 1),
            (-7, 2): (-3, -1),
            (7, -2): (-3, 1),
            (-7, -2): (3, -1),
            (0, 5): (0, 0),
            (6, 3): (2, 0),
        }
        for (dividend, divisor), expected in cases.items():
            self.assertEqual(expected, truncated_divmod(dividend, divisor), (dividend, divisor))
            quotient, remainder = expected
            self.assertEqual(dividend, quotient * divisor + remainder)


class EvaluatorTestCase(unittest.TestCase):

    def setUp(self):
        self.evaluator = Evaluator()

    def evaluate(self, line):
        return self.evaluator.evaluate_statement(parse_statement(line))

    def test_arithmetic(self):
        cases = {
            "2+3*4": 14,
            "(2+3)*4": 20,
            "10-3-2": 5,
            "-5+2": -3,
            "+5": 5,
            "--5": 5,
            "7/2": 3,
            "7%2": 1,
            "-7/2": -3,
            "-7%2": -1,
            "100 / 10 / 5": 2,
            "2 * (3 + 4) % 5": 4,
            "123456789 * 987654321": 121932631112635269,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.evaluate(case), case)

    def test_long_chains(self):
        cases = {
            "+".join(["1"] * 5000): 5000,
            "-".join(["1"] * 4000): -3998,
            "*".join(["1"] * 3000): 1,
            "-" * 100 + "+".join(["2"] * 3000): 6000,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.evaluate(case), case[:20])

        self.evaluate("x = 2")
        self.assertEqual(6000, self.evaluate("x = " + " + ".join(["x"] * 3000)))
        self.assertEqual([("x", 6000)], self.evaluator.list_variables())

    def test_long_chain_division_by_zero(self):
        chain = "+".join(["n"] * 3000)
        with self.assertRaises(DivisionByZero) as ctx:
            self.evaluate(f"({chain}) / 0")
        self.assertEqual((0, len(chain) + 6), (ctx.exception.start, ctx.exception.end))
        self.assertEqual([], self.evaluator.list_variables())

    def test_division_by_zero(self):
        should_raise = ["5/0", "5%0", "1 / (2 - 2)", "x % y"]
        for case in should_raise:
            self.assertRaises(DivisionByZero, self.evaluate, case)

    def test_division_by_zero_position(self):
        with self.assertRaises(DivisionByZero) as ctx:
            self.evaluate("1 + 8 / (4 - 4)")
        self.assertEqual((4, 15), (ctx.exception.start, ctx.exception.end))

    def test_assignment(self):
        self.assertEqual(5, self.evaluate("x = 5"))
        self.assertEqual([("x", 5)], self.evaluator.list_variables())
        self.assertEqual(6, self.evaluate("x+1"))

        self.assertEqual(12, self.evaluate("x = x * 2 + 2"))
        self.assertEqual(12, self.evaluator.lookup("x"))

    def test_materialize(self):
        self.assertEqual(1, self.evaluate("y+1"))
        self.assertEqual([("y", 0)], self.evaluator.list_variables())
        self.assertEqual([Identifier("y")], self.evaluator.materialized)

        self.assertEqual(0, self.evaluate("y"))
        self.assertEqual([], self.evaluator.materialized)

    def test_left_evaluated_first(self):
        self.assertEqual(0, self.evaluate("a + a"))
        self.assertEqual([Identifier("a")], self.evaluator.materialized)
        self.assertEqual(0, self.evaluate("b = c - d"))
        self.assertEqual(["a", "c", "d", "b"], [name for name, _ in self.evaluator.list_variables()])

    def test_failed_statement_leaves_environment(self):
        self.evaluate("x = 1")
        should_raise = ["x = 2 + 1 / 0", "z = q % 0", "w + 1 / 0"]
        for case in should_raise:
            self.assertRaises(DivisionByZero, self.evaluate, case)
            self.assertEqual([("x", 1)], self.evaluator.list_variables(), case)
            self.assertEqual([], self.evaluator.materialized, case)

    def test_list_order_is_stable(self):
        for line in ["b = 1", "a = 2", "c = 3", "b = 4"]:
            self.evaluate(line)
        self.assertEqual([("b", 4), ("a", 2), ("c", 3)], self.evaluator.list_variables())

    def test_lookup(self):
        self.assertRaises(UndefinedVariable, self.evaluator.lookup, "nope")
        self.assertEqual([], self.evaluator.list_variables())

        self.evaluator.assign("n", 3)
        self.assertEqual(3, self.evaluator.lookup("n"))

    def test_remove(self):
        self.evaluate("x = 1")
        self.evaluate("y = 2")
        self.evaluator.remove("x")
        self.assertEqual([("y", 2)], self.evaluator.list_variables())
        self.assertRaises(UndefinedVariable, self.evaluator.remove, "x")

    def test_clear_variables(self):
        self.evaluator.clear_variables()
        self.assertEqual([], self.evaluator.list_variables())

        self.evaluate("x = 5")
        self.evaluate("y + 1")
        self.evaluator.clear_variables()
        self.assertEqual([], self.evaluator.list_variables())

        self.evaluator.clear_variables()
        self.assertEqual([], self.evaluator.list_variables())
        self.assertEqual(0, self.evaluate("x"))

    def test_unknown_node(self):
        self.assertRaises(TypeError, self.evaluator.evaluate_statement, Expression(None))
        self.assertRaises(TypeError, self.evaluator.evaluate_statement, "1 + 1")


class EnvironmentTestCase(unittest.TestCase):

    def test_snapshot_restore(self):
        env = Environment()
        env.assign("a", 1)
        snapshot = env.snapshot()

        env.assign("a", 2)
        env.materialize("b")
        self.assertEqual(2, len(env))

        env.restore(snapshot)
        self.assertEqual([("a", 1)], env.items())
        self.assertNotIn("b", env)

    def test_materialize(self):
        env = Environment()
        self.assertEqual(0, env.materialize("x"))
        self.assertIn("x", env)
        env.assign("x", 9)
        self.assertEqual(9, env.materialize("x"))
        self.assertRaises(KeyError, env.lookup, "y")


if __name__ == '__main__':
    unittest.main()
