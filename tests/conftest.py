from __future__ import annotations

import pytest


class FixedRandomSource:
    """Hands out a scripted sequence of draws and records every request."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.calls: list[tuple[int, int]] = []

    def next_in_range(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        if not self.draws:
            raise AssertionError("random source exhausted")
        value = self.draws.pop(0)
        assert low <= value <= high, f"scripted draw {value} outside [{low}, {high}]"
        return value


class ConstantRandomSource:
    """Always returns the same value."""

    def __init__(self, value: int):
        self.value = value
        self.calls = 0

    def next_in_range(self, low: int, high: int) -> int:
        self.calls += 1
        return self.value


@pytest.fixture
def fixed_rng():
    return FixedRandomSource


@pytest.fixture
def constant_rng():
    return ConstantRandomSource
