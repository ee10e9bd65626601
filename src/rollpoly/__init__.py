"""Tabletop dice notation parser and roller."""

from .dice import roll, roll_duality, roll_from_text, roll_many
from .errors import (
    DiceError,
    EmptyInputError,
    InvalidDiceCountError,
    InvalidDieSizeError,
    InvalidModifierError,
    InvalidNotationError,
    UnsupportedOperatorError,
)
from .evaluator import evaluate
from .formatting import format_expression
from .models import Expression, RollOutput
from .parser import parse
from .random_source import RandomSource, SeededRandomSource, SystemRandomSource
from .stats import RollStatistics, roll_statistics
from .validation import validate


__version__ = "0.1.0"

__all__ = [
    "DiceError",
    "EmptyInputError",
    "Expression",
    "InvalidDiceCountError",
    "InvalidDieSizeError",
    "InvalidModifierError",
    "InvalidNotationError",
    "RandomSource",
    "RollOutput",
    "RollStatistics",
    "SeededRandomSource",
    "SystemRandomSource",
    "UnsupportedOperatorError",
    "evaluate",
    "format_expression",
    "parse",
    "roll",
    "roll_duality",
    "roll_from_text",
    "roll_many",
    "roll_statistics",
    "validate",
]
