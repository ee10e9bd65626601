from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias


TokenKind: TypeAlias = Literal["number", "dice", "operator", "modifier", "comparator"]
Comparison: TypeAlias = Literal[">", "<", "="]
BinaryOperator: TypeAlias = Literal["+", "-", "*", "/", "//"]

SUPPORTED_OPERATORS: frozenset[str] = frozenset({"+", "-", "*", "/", "//"})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


@dataclass(frozen=True)
class Comparator:
    op: Comparison
    value: int

    def matches(self, roll: int) -> bool:
        if self.op == ">":
            return roll > self.value
        if self.op == "<":
            return roll < self.value
        return roll == self.value

    def __str__(self) -> str:
        return str(self.value) if self.op == "=" else f"{self.op}{self.value}"


@dataclass(frozen=True)
class KeepHighest:
    count: int = 1


@dataclass(frozen=True)
class KeepLowest:
    count: int = 1


@dataclass(frozen=True)
class DropHighest:
    count: int = 1


@dataclass(frozen=True)
class DropLowest:
    count: int = 1


@dataclass(frozen=True)
class Explode:
    comparator: Comparator


@dataclass(frozen=True)
class RerollOnce:
    comparator: Comparator


@dataclass(frozen=True)
class RerollContinuous:
    comparator: Comparator


@dataclass(frozen=True)
class SuccessIf:
    comparator: Comparator


@dataclass(frozen=True)
class FailureIf:
    comparator: Comparator


KeepDrop: TypeAlias = KeepHighest | KeepLowest | DropHighest | DropLowest
Modifier: TypeAlias = (
    KeepHighest
    | KeepLowest
    | DropHighest
    | DropLowest
    | Explode
    | RerollOnce
    | RerollContinuous
    | SuccessIf
    | FailureIf
)

# Letters used in notation for each modifier, also used when formatting.
MODIFIER_LETTERS: dict[type, str] = {
    KeepHighest: "K",
    KeepLowest: "k",
    DropHighest: "X",
    DropLowest: "x",
    Explode: "!",
    RerollOnce: "r",
    RerollContinuous: "R",
    SuccessIf: "",
    FailureIf: "f",
}


@dataclass(frozen=True)
class DiceGroup:
    count: int
    sides: int
    modifiers: tuple[Modifier, ...] = ()

    def modifiers_of(self, *kinds: type) -> tuple[Modifier, ...]:
        return tuple(m for m in self.modifiers if isinstance(m, kinds))

    @property
    def counts_successes(self) -> bool:
        return any(isinstance(m, (SuccessIf, FailureIf)) for m in self.modifiers)


@dataclass(frozen=True)
class Constant:
    value: int


Term: TypeAlias = Constant | DiceGroup


@dataclass(frozen=True)
class Expression:
    """A first term followed by (operator, term) pairs, applied left to right."""

    first: Term
    rest: tuple[tuple[BinaryOperator, Term], ...] = ()

    @property
    def terms(self) -> tuple[Term, ...]:
        return (self.first, *(term for _, term in self.rest))

    @property
    def dice_groups(self) -> tuple[DiceGroup, ...]:
        return tuple(t for t in self.terms if isinstance(t, DiceGroup))


@dataclass(frozen=True)
class RollOutput:
    """Result of one evaluation.

    Either an ordered sequence of individual results (die faces and constants),
    or, when any term counted successes, a single signed net-success scalar.
    """

    values: tuple[int, ...]
    successes: int | None = None

    @classmethod
    def sequence(cls, values: list[int] | tuple[int, ...]) -> RollOutput:
        return cls(values=tuple(values))

    @classmethod
    def count(cls, successes: int) -> RollOutput:
        return cls(values=(successes,), successes=successes)

    @property
    def is_success_count(self) -> bool:
        return self.successes is not None

    @property
    def total(self) -> int:
        return sum(self.values)

    def as_list(self) -> list[int]:
        return list(self.values)
