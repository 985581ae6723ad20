"""Precedence climbing (Pratt) parser for the calculator language. See syntax.py for the grammar.

Every operator has a binding power:

```
LOWEST        ; every token that cannot extend an expression: "(", ")", "=", numbers, identifiers, end of input
ADD_SUB       ; "+" "-"
PROD_DIV_MOD  ; "*" "/" "%"
PREFIX        ; unary "+" "-"
```

parse_expression keeps consuming infix operators for as long as the next operator binds strictly tighter than the
caller's minimum. The right operand of an infix operator is parsed with the operator's own binding power, so an
operator of the same level stops it: "a - b - c" parses to "(a - b) - c".

Source: https://journal.stuffwithstuff.com/2011/03/19/pratt-parsers-expression-parsing-made-easy/
"""

from dataclasses import replace

from calculator.lang.error import ParseError
from calculator.pure import lexical
from calculator.pure.syntax import (
    Assignment,
    BinaryExpression,
    BinaryOp,
    Expression,
    Identifier,
    Literal,
    NegativeExpression,
)

LOWEST = 0
ADD_SUB = 1
PROD_DIV_MOD = 2
PREFIX = 3

PRECEDENCES = {
    "+": ADD_SUB,
    "-": ADD_SUB,
    "*": PROD_DIV_MOD,
    "/": PROD_DIV_MOD,
    "%": PROD_DIV_MOD,
}


def precedence(token):
    """Binding power of token when it appears in infix position."""
    if isinstance(token, lexical.Operator):
        return PRECEDENCES.get(token.symbol, LOWEST)
    return LOWEST


class Parser:
    """Parses exactly one statement from one line, with a two-token buffer (self.cur, self.peek)."""

    def __init__(self, line):
        """Eagerly reads the first two tokens, so a LexicalError in either is raised here."""
        self.line = line
        self.lexer = lexical.Lexer(line)

        self.cur = self.lexer.next_token()
        self.peek = self.lexer.next_token()

    def read_token(self):
        self.cur = self.peek
        self.peek = self.lexer.next_token()

    def error(self, msg, token):
        """Returns a ParseError pointing at token. msg may reference the token's text with '{1}'."""
        return ParseError(msg, (self.line, token.text), start=token.start, end=max(token.end, token.start + 1))

    def parse_statement(self):
        """Parses the whole line as one Assignment or Expression. Raises a ParseError if the line isn't a valid
        statement, including when tokens are left over after a complete statement.
        """
        try:
            if isinstance(self.cur, lexical.Identifier) and isinstance(self.peek, lexical.Assign):
                name = self.cur.name
                self.read_token()
                self.read_token()
                stmt = Assignment(name, self.parse_expression(LOWEST), source=self.line)
            else:
                stmt = Expression(self.parse_expression(LOWEST), source=self.line)
        except RecursionError:
            raise ParseError("'{}' is nested too deeply", self.line) from None

        if not isinstance(self.peek, lexical.EndOfInput):
            raise self.error("unexpected '{1}' after end of statement", self.peek)
        return stmt

    def parse_expression(self, min_precedence):
        """Parses an expression starting at self.cur. On return, self.cur is the last token of the expression."""
        left = self.parse_prefix()

        while min_precedence < precedence(self.peek):
            self.read_token()
            left = self.parse_infix(left)

        return left

    def parse_prefix(self):
        """Parses the term self.cur starts: a literal, an identifier, a unary operation or a grouped expression."""
        token = self.cur

        if isinstance(token, lexical.Number):
            return Literal(token.value, start=token.start, end=token.end)

        elif isinstance(token, lexical.Identifier):
            return Identifier(token.name, start=token.start, end=token.end)

        elif isinstance(token, lexical.Operator) and token.symbol in "+-":
            self.read_token()
            operand = self.parse_operand(PREFIX, token)
            if token.symbol == "+":
                return operand
            return NegativeExpression(operand, start=token.start, end=operand.end)

        elif isinstance(token, lexical.Operator) and token.symbol == "(":
            return self.parse_grouped(token)

        elif isinstance(token, lexical.EndOfInput):
            raise self.error("expected an expression, got {1}", token)

        raise self.error("unexpected '{1}'", token)

    def parse_operand(self, min_precedence, operator):
        """Parses the operand following operator, naming operator in the error if the operand is missing."""
        if isinstance(self.cur, lexical.EndOfInput):
            raise self.error(f"missing operand after '{operator.text}'", self.cur)
        return self.parse_expression(min_precedence)

    def parse_grouped(self, lparen):
        self.read_token()
        expr = self.parse_expression(LOWEST)

        if not (isinstance(self.peek, lexical.Operator) and self.peek.symbol == ")"):
            if isinstance(self.peek, lexical.EndOfInput):
                msg = "unmatched '(' at column {}".format(lparen.start)
                raise self.error(msg, self.peek)
            raise self.error("expected ')', got '{1}'", self.peek)

        self.read_token()
        return replace(expr, start=lparen.start, end=self.cur.end)  # span includes the parentheses

    def parse_infix(self, left):
        """Parses the infix operation self.cur starts, with left as its left operand."""
        operator = self.cur
        try:
            op = BinaryOp(operator.symbol)
        except (AttributeError, ValueError):
            raise self.error("'{1}' is not an infix operator", operator) from None

        self.read_token()
        right = self.parse_operand(precedence(operator), operator)
        return BinaryExpression(op, left, right, start=left.start, end=right.end)


def parse_statement(line):
    """Parses line into a Statement."""
    return Parser(line).parse_statement()
