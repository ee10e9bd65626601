from __future__ import annotations

from .errors import InvalidNotationError
from .models import Token


_DIGITS = frozenset("0123456789")
_DICE_MARKERS = {"d", "D"}
_MODIFIER_LETTERS = {"K", "k", "X", "x", "!", "r", "R", "f"}
_COMPARATORS = {">", "<"}

# Recognised so the parser can report them as unsupported rather than garbage.
_OPERATOR_CHARS = {"+", "-", "*", "/", "%", "^"}
_DOUBLED_OPERATORS = {"//", "**"}


def tokenize(notation: str) -> list[Token]:
    """Split notation into tokens, skipping whitespace.

    Letters are case-significant except the dice marker: `K` keeps highest
    while `k` keeps lowest, but `d` and `D` are the same marker.
    """

    tokens: list[Token] = []
    i = 0
    n = len(notation)

    while i < n:
        ch = notation[i]

        if ch.isspace():
            i += 1
            continue

        if ch in _DIGITS:
            j = i
            while j < n and notation[j] in _DIGITS:
                j += 1
            tokens.append(Token("number", notation[i:j], i))
            i = j
            continue

        if ch in _DICE_MARKERS:
            tokens.append(Token("dice", ch, i))
            i += 1
            continue

        if ch in _MODIFIER_LETTERS:
            tokens.append(Token("modifier", ch, i))
            i += 1
            continue

        if ch in _COMPARATORS:
            tokens.append(Token("comparator", ch, i))
            i += 1
            continue

        if ch in _OPERATOR_CHARS:
            pair = notation[i : i + 2]
            if pair in _DOUBLED_OPERATORS:
                tokens.append(Token("operator", pair, i))
                i += 2
            else:
                tokens.append(Token("operator", ch, i))
                i += 1
            continue

        raise InvalidNotationError(notation, f"unexpected character '{ch}' at position {i}")

    return tokens
