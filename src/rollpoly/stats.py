from __future__ import annotations

import logging
import statistics
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from .evaluator import evaluate
from .formatting import format_expression
from .parser import parse
from .random_source import RandomSource, SystemRandomSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollStatistics:
    notation: str
    rolls: int
    minimum: int
    maximum: int
    mean: float
    median: float
    distribution: dict[int, int] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "notation": self.notation,
            "rolls": self.rolls,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "mean": round(self.mean, 2),
            "median": self.median,
            "distribution": [
                {"total": total, "count": count, "percent": round(100 * count / self.rolls, 1)}
                for total, count in sorted(self.distribution.items())
            ],
            "unique_totals": len(self.distribution),
        }


def roll_statistics(notation: str, rolls: int, rng: RandomSource | None = None) -> RollStatistics:
    """Roll `notation` `rolls` times and summarise the totals."""

    if rolls < 1:
        raise ValueError("rolls must be at least 1")

    expression = parse(notation)
    rng = rng or SystemRandomSource()

    totals = [evaluate(expression, rng).total for _ in range(rolls)]
    logger.debug("Collected %d totals for %s", len(totals), notation)

    return RollStatistics(
        notation=format_expression(expression),
        rolls=rolls,
        minimum=min(totals),
        maximum=max(totals),
        mean=statistics.fmean(totals),
        median=float(statistics.median(totals)),
        distribution=dict(sorted(Counter(totals).items())),
    )
