from __future__ import annotations

from .errors import InvalidDiceCountError, InvalidDieSizeError, InvalidModifierError
from .formatting import format_term
from .models import (
    Constant,
    DiceGroup,
    DropHighest,
    DropLowest,
    Explode,
    Expression,
    FailureIf,
    KeepHighest,
    KeepLowest,
    SuccessIf,
)


# K/X pick from the top of the pool, k/x from the bottom.
_HIGH_CLASS = (KeepHighest, DropHighest)
_LOW_CLASS = (KeepLowest, DropLowest)


def _validate_group(group: DiceGroup) -> None:
    if group.sides < 1:
        raise InvalidDieSizeError(group.sides)
    if group.count < 1:
        raise InvalidDiceCountError(group.count)

    for mod in group.modifiers_of(*_HIGH_CLASS, *_LOW_CLASS):
        if mod.count < 0:
            raise InvalidModifierError(format_term(group), "keep/drop amount must not be negative")

    if len(group.modifiers_of(*_HIGH_CLASS)) > 1 or len(group.modifiers_of(*_LOW_CLASS)) > 1:
        raise InvalidModifierError(
            format_term(group), "only one keep/drop modifier per direction (K/X high, k/x low)"
        )

    if len(group.modifiers_of(Explode)) > 1:
        raise InvalidModifierError(format_term(group), "only one explode modifier is allowed")

    successes = group.modifiers_of(SuccessIf)
    failures = group.modifiers_of(FailureIf)
    if len(successes) > 1 or len(failures) > 1:
        raise InvalidModifierError(format_term(group), "only one success and one failure condition are allowed")
    if failures and not successes:
        raise InvalidModifierError(format_term(group), "a failure condition needs a success condition")

    if successes and failures:
        success_op = successes[0].comparator.op
        failure_op = failures[0].comparator.op
        if success_op == failure_op and success_op in (">", "<"):
            raise InvalidModifierError(
                format_term(group),
                "success and failure conditions cannot both be greater than or both less than",
            )


def validate(expression: Expression) -> None:
    """Reject well-formed but meaningless expressions before any dice are rolled."""

    for group in expression.dice_groups:
        _validate_group(group)

    for op, term in expression.rest:
        if op in ("/", "//") and isinstance(term, Constant) and term.value == 0:
            raise InvalidModifierError(f"{op} 0", "division by zero")
