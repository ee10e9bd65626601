from __future__ import annotations

from .errors import EmptyInputError, InvalidNotationError, UnsupportedOperatorError
from .lexer import tokenize
from .models import (
    SUPPORTED_OPERATORS,
    BinaryOperator,
    Comparator,
    Constant,
    DiceGroup,
    DropHighest,
    DropLowest,
    Explode,
    Expression,
    FailureIf,
    KeepHighest,
    KeepLowest,
    Modifier,
    RerollContinuous,
    RerollOnce,
    SuccessIf,
    Term,
    Token,
)
from .validation import validate


_KEEP_DROP = {
    "K": KeepHighest,
    "k": KeepLowest,
    "X": DropHighest,
    "x": DropLowest,
}

_REROLLS = {
    "r": RerollOnce,
    "R": RerollContinuous,
}


class _Parser:
    """Recursive descent over a token list, one token of lookahead.

    expression := term (binop term)*
    term       := number | [number] 'd' number modifier*
    """

    def __init__(self, tokens: list[Token], source: str) -> None:
        self.tokens = tokens
        self.source = source
        self.pos = 0

    def peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def error(self, reason: str) -> InvalidNotationError:
        return InvalidNotationError(self.source, reason)

    def expect_number(self, what: str) -> int:
        tok = self.peek()
        if tok is None or tok.kind != "number":
            where = "end of input" if tok is None else f"'{tok.text}' at position {tok.position}"
            raise self.error(f"expected {what}, found {where}")
        return int(self.advance().text)

    def parse_expression(self) -> Expression:
        first = self.parse_term()
        rest: list[tuple[BinaryOperator, Term]] = []

        while (tok := self.peek()) is not None:
            if tok.kind in ("modifier", "comparator"):
                raise self.error(f"modifier '{tok.text}' at position {tok.position} has no preceding dice group")
            if tok.kind != "operator":
                raise self.error(f"unexpected '{tok.text}' at position {tok.position}")
            if tok.text not in SUPPORTED_OPERATORS:
                raise UnsupportedOperatorError(tok.text, self.source)
            self.advance()
            if self.peek() is None:
                raise self.error(f"operator '{tok.text}' is missing its right operand")
            rest.append((tok.text, self.parse_term()))

        return Expression(first=first, rest=tuple(rest))

    def parse_term(self) -> Term:
        tok = self.peek()
        if tok is None:
            raise self.error("expected a number or dice group, found end of input")

        if tok.kind == "number":
            self.advance()
            nxt = self.peek()
            if nxt is not None and nxt.kind == "dice":
                return self.parse_dice_group(int(tok.text))
            return Constant(int(tok.text))

        if tok.kind == "dice":
            return self.parse_dice_group(1)

        if tok.kind == "operator":
            if tok.text not in SUPPORTED_OPERATORS:
                raise UnsupportedOperatorError(tok.text, self.source)
            raise self.error(f"operator '{tok.text}' at position {tok.position} is missing its left operand")

        raise self.error(f"modifier '{tok.text}' at position {tok.position} has no preceding dice group")

    def parse_dice_group(self, count: int) -> DiceGroup:
        self.advance()  # 'd'
        sides = self.expect_number("a die size after 'd'")

        modifiers: list[Modifier] = []
        while (mod := self.parse_modifier(sides)) is not None:
            modifiers.append(mod)

        return DiceGroup(count=count, sides=sides, modifiers=tuple(modifiers))

    def parse_modifier(self, sides: int) -> Modifier | None:
        tok = self.peek()
        if tok is None:
            return None

        if tok.kind == "comparator":
            return SuccessIf(self.parse_comparator(required=True))

        if tok.kind != "modifier":
            return None

        self.advance()
        letter = tok.text

        if letter in _KEEP_DROP:
            nxt = self.peek()
            amount = int(self.advance().text) if nxt is not None and nxt.kind == "number" else 1
            return _KEEP_DROP[letter](amount)

        if letter == "!":
            return Explode(self.parse_comparator() or Comparator("=", sides))

        if letter in _REROLLS:
            return _REROLLS[letter](self.parse_comparator() or Comparator("=", 1))

        # 'f'
        comparator = self.parse_comparator(required=True)
        return FailureIf(comparator)

    def parse_comparator(self, required: bool = False) -> Comparator | None:
        tok = self.peek()
        if tok is not None and tok.kind == "comparator":
            self.advance()
            return Comparator(tok.text, self.expect_number(f"a value after '{tok.text}'"))
        if tok is not None and tok.kind == "number":
            return Comparator("=", int(self.advance().text))
        if required:
            raise self.error("expected a comparison such as '>4', '<2' or '3'")
        return None


def parse_tokens(tokens: list[Token], source: str = "") -> Expression:
    """Build an Expression from tokens. Does not validate."""

    if not tokens:
        raise EmptyInputError()
    return _Parser(tokens, source).parse_expression()


def parse(notation: str) -> Expression:
    """Tokenize, parse and validate a notation. Never draws random numbers."""

    if not notation or not notation.strip():
        raise EmptyInputError()

    expression = parse_tokens(tokenize(notation), notation)
    validate(expression)
    return expression
