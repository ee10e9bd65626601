"""Evaluation of parsed dice expressions.

Each dice group runs through a fixed pipeline, whatever order its modifiers
were written in:

    roll -> reroll (once, then continuous) -> explode -> keep/drop -> count

Textual order only matters within a stage: chained reroll targets (`r1r2`)
combine into one predicate, and keep/drop modifiers apply in the order given.

Continuous rerolls and explosions are bounded by MAX_REROLLS and
MAX_EXPLOSIONS. Once a die hits the cap its last draw stands. This trades
strict fairness for termination on comparators that match every face
(`1d6R<7`, `1d2!<3`).
"""

from __future__ import annotations

from .errors import InvalidModifierError
from .models import (
    BinaryOperator,
    Comparator,
    Constant,
    DiceGroup,
    DropHighest,
    DropLowest,
    Explode,
    Expression,
    FailureIf,
    KeepDrop,
    KeepHighest,
    KeepLowest,
    RerollContinuous,
    RerollOnce,
    RollOutput,
    SuccessIf,
    Term,
)
from .random_source import RandomSource
from .validation import validate


MAX_REROLLS = 100
MAX_EXPLOSIONS = 100


def _any_match(comparators: list[Comparator], roll: int) -> bool:
    return any(c.matches(roll) for c in comparators)


def roll_pool(group: DiceGroup, rng: RandomSource) -> list[int]:
    return [rng.next_in_range(1, group.sides) for _ in range(group.count)]


def apply_rerolls(group: DiceGroup, pool: list[int], rng: RandomSource) -> list[int]:
    once = [m.comparator for m in group.modifiers_of(RerollOnce)]
    continuous = [m.comparator for m in group.modifiers_of(RerollContinuous)]
    if not once and not continuous:
        return pool

    result: list[int] = []
    for roll in pool:
        if once and _any_match(once, roll):
            roll = rng.next_in_range(1, group.sides)

        rerolls = 0
        while continuous and rerolls < MAX_REROLLS and _any_match(continuous, roll):
            roll = rng.next_in_range(1, group.sides)
            rerolls += 1

        result.append(roll)
    return result


def apply_explosions(group: DiceGroup, pool: list[int], rng: RandomSource) -> list[int]:
    explode = group.modifiers_of(Explode)
    if not explode:
        return pool
    comparator = explode[0].comparator

    result = list(pool)
    # Index of the original die each entry descends from.
    origin = list(range(len(pool)))
    added = [0] * len(pool)

    i = 0
    while i < len(result):
        root = origin[i]
        if comparator.matches(result[i]) and added[root] < MAX_EXPLOSIONS:
            result.append(rng.next_in_range(1, group.sides))
            origin.append(root)
            added[root] += 1
        i += 1
    return result


def select_indices(pool: list[int], modifier: KeepDrop) -> list[int]:
    """Indices of the dice that survive one keep/drop step, in roll order."""

    # Highest first; equal values rank by roll order.
    ranked = sorted(range(len(pool)), key=lambda i: (-pool[i], i))
    n = max(0, min(modifier.count, len(pool)))

    top = set(ranked[:n])
    bottom = set(ranked[len(ranked) - n :])

    if isinstance(modifier, KeepHighest):
        survivors = top
    elif isinstance(modifier, KeepLowest):
        survivors = bottom
    elif isinstance(modifier, DropHighest):
        survivors = set(ranked) - top
    else:
        survivors = set(ranked) - bottom

    return sorted(survivors)


def apply_keep_drop(group: DiceGroup, pool: list[int]) -> list[int]:
    for modifier in group.modifiers_of(KeepHighest, KeepLowest, DropHighest, DropLowest):
        pool = [pool[i] for i in select_indices(pool, modifier)]
    return pool


def count_successes(group: DiceGroup, pool: list[int]) -> int:
    success = group.modifiers_of(SuccessIf)[0].comparator
    failure_mods = group.modifiers_of(FailureIf)
    failure = failure_mods[0].comparator if failure_mods else None

    net = sum(1 for roll in pool if success.matches(roll))
    if failure is not None:
        net -= sum(1 for roll in pool if failure.matches(roll))
    return net


def evaluate_group(group: DiceGroup, rng: RandomSource) -> RollOutput:
    pool = roll_pool(group, rng)
    pool = apply_rerolls(group, pool, rng)
    pool = apply_explosions(group, pool, rng)
    pool = apply_keep_drop(group, pool)

    if group.counts_successes:
        return RollOutput.count(count_successes(group, pool))
    return RollOutput.sequence(pool)


def evaluate_term(term: Term, rng: RandomSource) -> RollOutput:
    if isinstance(term, Constant):
        return RollOutput.sequence([term.value])
    return evaluate_group(term, rng)


def _truncating_divide(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def combine(left: RollOutput, op: BinaryOperator, right: RollOutput) -> RollOutput:
    scalar = left.is_success_count or right.is_success_count

    if op in ("+", "-"):
        if scalar:
            value = left.total + right.total if op == "+" else left.total - right.total
            return RollOutput.count(value)
        tail = right.values if op == "+" else tuple(-v for v in right.values)
        return RollOutput.sequence(left.values + tail)

    a, b = left.total, right.total
    if op == "*":
        value = a * b
    else:
        if b == 0:
            raise InvalidModifierError(f"{op} {b}", "division by zero")
        value = a // b if op == "//" else _truncating_divide(a, b)

    return RollOutput.count(value) if scalar else RollOutput.sequence([value])


def evaluate(expression: Expression, rng: RandomSource) -> RollOutput:
    """Evaluate an expression left to right against rng.

    Raises DiceError on invalid expressions (before any draw) and on a
    zero divisor produced by a roll.
    """

    validate(expression)

    result = evaluate_term(expression.first, rng)
    for op, term in expression.rest:
        result = combine(result, op, evaluate_term(term, rng))
    return result
