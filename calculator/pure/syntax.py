"""Abstract syntax tree for the calculator language.

Formally, a statement can be defined as

```
<statement>  ::= <identifier> "=" <expr>     ; "assignment"
               | <expr>                      ; "expression"

<expr>       ::= <number>                    ; "literal"
               | <identifier>                ; resolved at evaluation time
               | <expr> <binary_op> <expr>   ; "binary expression", left-associative
               | "-" <expr>                  ; "negative expression"
               | "+" <expr>                  ; no-op: parses to <expr> itself
               | "(" <expr> ")"
```

Trees are immutable and every node exclusively owns its children, so they are acyclic by construction. Like tokens,
nodes remember the columns they were parsed from (for error messages only), so two trees parsed from different
spellings of the same statement, e.g. "1+2" and "1 + 2", compare equal.
"""

from dataclasses import dataclass, field
from enum import Enum


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"


@dataclass(frozen=True)
class AstNode:
    """Superclass for all expression nodes."""
    start: int = field(default=0, compare=False, kw_only=True)
    end: int = field(default=0, compare=False, kw_only=True)

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        BinaryExpression(op='<op>', nodes=[
            Literal(value=<value>),
            NegativeExpression(nodes=[
                Identifier(name='<name>')
            ])
        ])
        """
        raise NotImplementedError()


@dataclass(frozen=True)
class Literal(AstNode):
    value: int

    def display(self, indents=0):
        return f"{'    ' * indents}Literal(value={self.value})"

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Identifier(AstNode):
    name: str

    def display(self, indents=0):
        return f"{'    ' * indents}Identifier(name='{self.name}')"

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class BinaryExpression(AstNode):
    op: BinaryOp
    left: AstNode
    right: AstNode

    def display(self, indents=0):
        nodes = ",\n".join(node.display(indents + 1) for node in (self.left, self.right))
        return f"{'    ' * indents}BinaryExpression(op='{self.op.value}', nodes=[\n{nodes}\n{'    ' * indents}])"

    def __str__(self):
        return f"({self.left} {self.op.value} {self.right})"


@dataclass(frozen=True)
class NegativeExpression(AstNode):
    operand: AstNode

    def display(self, indents=0):
        return f"{'    ' * indents}NegativeExpression(nodes=[\n{self.operand.display(indents + 1)}\n{'    ' * indents}])"

    def __str__(self):
        return f"(-{self.operand})"


@dataclass(frozen=True)
class Statement:
    """Superclass for the two statement kinds. source is the line the statement was parsed from."""
    source: str = field(default="", compare=False, kw_only=True)


@dataclass(frozen=True)
class Expression(Statement):
    root: AstNode

    def __str__(self):
        return str(self.root)


@dataclass(frozen=True)
class Assignment(Statement):
    name: str
    value: AstNode

    def __str__(self):
        return f"{self.name} = {self.value}"
