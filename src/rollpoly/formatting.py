from __future__ import annotations

from .models import (
    MODIFIER_LETTERS,
    Constant,
    DropHighest,
    DropLowest,
    Expression,
    KeepHighest,
    KeepLowest,
    Modifier,
    Term,
)


def format_modifier(modifier: Modifier) -> str:
    letter = MODIFIER_LETTERS[type(modifier)]
    if isinstance(modifier, (KeepHighest, KeepLowest, DropHighest, DropLowest)):
        return letter if modifier.count == 1 else f"{letter}{modifier.count}"
    return f"{letter}{modifier.comparator}"


def format_term(term: Term) -> str:
    if isinstance(term, Constant):
        return str(term.value)
    base = f"{term.count}d{term.sides}" if term.count != 1 else f"d{term.sides}"
    return base + "".join(format_modifier(m) for m in term.modifiers)


def format_expression(expression: Expression) -> str:
    """Render the canonical notation, e.g. '4d6K3 + 2'."""

    chunks = [format_term(expression.first)]
    for op, term in expression.rest:
        chunks.append(f"{op} {format_term(term)}")
    return " ".join(chunks)
