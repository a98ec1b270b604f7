"""Pytest fixtures: bar sequences for deterministic tests."""

from datetime import datetime, timedelta, timezone

import pytest

from feature_core.contracts import Bar

# Ten consecutive trading days used by the end-to-end example.
EXAMPLE_CLOSES = [100.0, 101.0, 99.0, 102.0, 105.0, 103.0, 106.0, 108.0, 107.0, 110.0]
EXAMPLE_VOLUMES = [1000.0, 1100.0, 900.0, 1200.0, 1300.0, 1050.0, 1400.0, 1600.0, 1500.0, 1800.0]


def _ts(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, 0, 0, tzinfo=timezone.utc)


def make_bars(
    closes: list[float],
    volumes: list[float] | None = None,
    *,
    symbol: str = "SPY",
    start: datetime | None = None,
    opens: list[float] | None = None,
) -> list[Bar]:
    """One bar per calendar day starting at *start*; open defaults to close - 1."""
    start = start or _ts(2024, 1, 1)
    volumes = volumes or [1000.0] * len(closes)
    opens = opens or [c - 1.0 for c in closes]
    return [
        Bar(o, max(o, c) + 1.0, min(o, c) - 1.0, c, v, start + timedelta(days=i), symbol)
        for i, (o, c, v) in enumerate(zip(opens, closes, volumes))
    ]


@pytest.fixture
def symbol() -> str:
    return "SPY"


@pytest.fixture
def example_bars() -> list[Bar]:
    return make_bars(EXAMPLE_CLOSES, EXAMPLE_VOLUMES)


@pytest.fixture
def long_bars() -> list[Bar]:
    """400 bars with varying closes and volumes, enough for every window."""
    closes = [100.0 + (i % 17) - (i % 5) * 0.5 + i * 0.1 for i in range(400)]
    volumes = [1000.0 + (i % 11) * 100.0 + (i % 3) * 50.0 for i in range(400)]
    return make_bars(closes, volumes)


@pytest.fixture
def benchmark_bars() -> list[Bar]:
    """Benchmark covering the first five days of the example period only."""
    return make_bars([5000.0, 5010.0, 5020.0, 5030.0, 5040.0], symbol="^GSPC")
