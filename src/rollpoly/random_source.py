from __future__ import annotations

import random
import secrets
from typing import Protocol


class RandomSource(Protocol):
    def next_in_range(self, low: int, high: int) -> int:
        """Return a uniformly distributed integer in [low, high], inclusive."""
        ...


class SystemRandomSource:
    """Default source, backed by the OS entropy pool."""

    name = "secrets.SystemRandom"

    def __init__(self) -> None:
        self._rng = secrets.SystemRandom()

    def next_in_range(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)


class SeededRandomSource:
    """Reproducible source for replays and tests. Not for fair play."""

    name = "random.Random"

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_in_range(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)
