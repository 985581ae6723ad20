"""Token generator for the calculator language. The `pure` directory contains the language core (lexing, parsing,
evaluation) without any I/O: see the `lang` directory for the interactive session built on top of it.

Tokens can be loosely defined as follows:

```
<operator>   ::= "+" | "-" | "*" | "/" | "%" | "(" | ")"
<assign>     ::= "="
<number>     ::= <digit>+                   ; base 10, non-negative (negation is a prefix operator)
<identifier> ::= (<letter> | "_")+          ; ASCII letters only: "x1" is <identifier> <number>
```

Only the space character separates tokens. Any other character raises a LexicalError.
"""

from dataclasses import dataclass, field

from calculator.lang.error import LexicalError


@dataclass(frozen=True)
class Token:
    """Superclass for all tokens. start and end are the columns of the token in the source line and are only used for
    error messages, so they take no part in equality.
    """
    start: int = field(default=0, compare=False, kw_only=True)
    end: int = field(default=0, compare=False, kw_only=True)

    @property
    def text(self):
        """How this token is displayed in error messages."""
        raise NotImplementedError()


@dataclass(frozen=True)
class Operator(Token):
    """Arithmetic operator or parenthesis."""
    SYMBOLS = "+-*/%()"
    symbol: str

    @property
    def text(self):
        return self.symbol


@dataclass(frozen=True)
class Number(Token):
    value: int

    @property
    def text(self):
        return str(self.value)


@dataclass(frozen=True)
class Identifier(Token):
    name: str

    @property
    def text(self):
        return self.name


@dataclass(frozen=True)
class Assign(Token):

    @property
    def text(self):
        return "="


@dataclass(frozen=True)
class EndOfInput(Token):

    @property
    def text(self):
        return "end of input"


class Lexer:
    """Lazy, single-pass tokenizer over one line of input."""
    WHITESPACE = " "

    def __init__(self, line):
        self.line = line
        self.pos = 0  # index of the next unread character

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_letter(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"

    def next_token(self):
        """Returns the next token and advances past it. Once the line is exhausted, EndOfInput is returned on every
        call. Raises a LexicalError on any character that cannot start a token.
        """
        self._skip_whitespace()
        start = self.pos

        if self.pos >= len(self.line):
            return EndOfInput(start=start, end=start)

        char = self.line[self.pos]
        if char in Operator.SYMBOLS:
            self.pos += 1
            return Operator(char, start=start, end=self.pos)

        elif char == "=":
            self.pos += 1
            return Assign(start=start, end=self.pos)

        elif Lexer.is_digit(char):
            lexeme = self._read_while(Lexer.is_digit)
            return Number(int(lexeme), start=start, end=self.pos)

        elif Lexer.is_letter(char):
            lexeme = self._read_while(Lexer.is_letter)
            return Identifier(lexeme, start=start, end=self.pos)

        raise LexicalError("unrecognized character '{1}'", (self.line, char), start=start, end=start + 1)

    def _read_while(self, predicate):
        """Consumes the maximal run of characters satisfying predicate and returns it."""
        start = self.pos
        while self.pos < len(self.line) and predicate(self.line[self.pos]):
            self.pos += 1
        return self.line[start:self.pos]

    def _skip_whitespace(self):
        while self.pos < len(self.line) and self.line[self.pos] in Lexer.WHITESPACE:
            self.pos += 1

    def __iter__(self):
        """Yields the remaining tokens, excluding the final EndOfInput."""
        while True:
            token = self.next_token()
            if isinstance(token, EndOfInput):
                return
            yield token
