"""Tree-walking evaluator for the calculator language.

Reading an identifier that was never assigned is not an error: the identifier is materialized in the environment with
the value 0, and evaluation continues with 0. Only direct queries of the environment (Evaluator.lookup, Evaluator.remove)
raise UndefinedVariable.
"""

from calculator.lang.error import DivisionByZero, UndefinedVariable
from calculator.pure.syntax import (
    Assignment,
    BinaryExpression,
    BinaryOp,
    Expression,
    Identifier,
    Literal,
    NegativeExpression,
)


def truncated_divmod(dividend, divisor):
    """Integer quotient and remainder, with the quotient truncated toward zero (unlike divmod, which floors). The
    remainder has the sign of dividend, and dividend == quotient * divisor + remainder.
    """
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return quotient, dividend - quotient * divisor


class Environment:
    """Session-lifetime mapping of variable name: last value. Iteration is in insertion order: reassigning a variable
    keeps its position, so listing is stable within a session.
    """

    def __init__(self):
        self._vars = {}

    def materialize(self, name):
        """Returns the value of name, first inserting name with value 0 if it is absent."""
        return self._vars.setdefault(name, 0)

    def lookup(self, name):
        """Returns the value of name. Raises a KeyError if name is absent."""
        return self._vars[name]

    def assign(self, name, value):
        self._vars[name] = value

    def remove(self, name):
        """Removes name. Raises a KeyError if name is absent."""
        del self._vars[name]

    def clear(self):
        self._vars.clear()

    def snapshot(self):
        """Returns a copy of the current bindings that can be passed to restore."""
        return dict(self._vars)

    def restore(self, snapshot):
        self._vars = dict(snapshot)

    def items(self):
        return list(self._vars.items())

    def __contains__(self, name):
        return name in self._vars

    def __len__(self):
        return len(self._vars)

    def __repr__(self):
        return f"Environment({self._vars})"


class Evaluator:
    """Evaluates Statements against the Environment it owns."""

    def __init__(self):
        self.env = Environment()
        self.materialized = []  # Identifier nodes materialized during the last call to evaluate_statement

    def evaluate_statement(self, stmt):
        """Evaluates stmt and returns its integer value. Assignments store the value before returning it. If an
        EvalError is raised, the environment is left exactly as it was before the call.
        """
        snapshot = self.env.snapshot()
        self.materialized = []

        try:
            if isinstance(stmt, Assignment):
                value = self.evaluate(stmt.value, stmt.source)
                self.env.assign(stmt.name, value)
                return value

            elif isinstance(stmt, Expression):
                return self.evaluate(stmt.root, stmt.source)

            raise TypeError(f"unknown statement type: {type(stmt).__name__}")

        except Exception:
            self.env.restore(snapshot)
            self.materialized = []
            raise

    def evaluate(self, node, source=""):
        """Evaluates the expression rooted at node. source is the line node was parsed from.

        The tree is walked in post-order with an explicit stack rather than by recursion: a left-associative chain
        such as "1+1+...+1" is as deep as it is long.
        """
        values = []
        stack = [(node, False)]  # (node, whether or not its operands are already on values)

        while stack:
            node, visited = stack.pop()

            if isinstance(node, Literal):
                values.append(node.value)

            elif isinstance(node, Identifier):
                if node.name not in self.env:
                    self.materialized.append(node)
                values.append(self.env.materialize(node.name))

            elif isinstance(node, NegativeExpression):
                if visited:
                    values.append(-values.pop())
                else:
                    stack.append((node, True))
                    stack.append((node.operand, False))

            elif isinstance(node, BinaryExpression):
                if visited:
                    right = values.pop()
                    left = values.pop()
                    values.append(self._apply(node, left, right, source))
                else:
                    stack.append((node, True))
                    stack.append((node.right, False))
                    stack.append((node.left, False))  # left first: it may materialize a variable the right one reads

            else:
                raise TypeError(f"unknown AST node type: {type(node).__name__}")

        return values.pop()

    @staticmethod
    def _apply(node, left, right, source):
        op = node.op
        if op is BinaryOp.ADD:
            return left + right
        elif op is BinaryOp.SUB:
            return left - right
        elif op is BinaryOp.MUL:
            return left * right

        if right == 0:
            snippet = source[node.start:node.end] or str(node)
            raise DivisionByZero("division by zero in '{1}'", (source, snippet), start=node.start, end=node.end)

        quotient, remainder = truncated_divmod(left, right)
        if op is BinaryOp.DIV:
            return quotient
        elif op is BinaryOp.MOD:
            return remainder

        raise TypeError(f"unknown operator: {op!r}")

    def lookup(self, name):
        """Returns the value of variable name. Raises UndefinedVariable if it does not exist."""
        try:
            return self.env.lookup(name)
        except KeyError:
            raise UndefinedVariable("'{}' is not defined", name) from None

    def assign(self, name, value):
        self.env.assign(name, value)

    def remove(self, name):
        """Removes variable name. Raises UndefinedVariable if it does not exist."""
        try:
            self.env.remove(name)
        except KeyError:
            raise UndefinedVariable("'{}' is not defined", name) from None

    def list_variables(self):
        """Returns [(name, value), ...] in insertion order."""
        return self.env.items()

    def clear_variables(self):
        self.env.clear()
