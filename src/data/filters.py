"""
Post-fetch date filtering. Applied identically to instrument and benchmark.
"""

from datetime import date
from typing import Iterable

from feature_core.contracts import Bar


def filter_by_date(
    bars: Iterable[Bar],
    start: date | None = None,
    end: date | None = None,
) -> list[Bar]:
    """Keep bars whose UTC calendar date lies in [start, end]. None = unbounded."""
    lo = start.isoformat() if start else None
    hi = end.isoformat() if end else None
    out = []
    for b in bars:
        d = b.date
        if lo is not None and d < lo:
            continue
        if hi is not None and d > hi:
            continue
        out.append(b)
    return out


def sort_bars(bars: Iterable[Bar]) -> list[Bar]:
    """Oldest first by timestamp."""
    return sorted(bars, key=lambda b: b.timestamp)
