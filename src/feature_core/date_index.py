"""
Date-keyed lookup of benchmark quotes for the calendar-date join.
"""

from __future__ import annotations

from typing import Iterable

from feature_core.contracts import Bar, BenchmarkQuote


def build_date_index(benchmark_bars: Iterable[Bar]) -> dict[str, BenchmarkQuote]:
    """Map each bar's UTC date (YYYY-MM-DD) to its open/close.

    When two bars fall on the same date the later one in sequence wins.
    """
    index: dict[str, BenchmarkQuote] = {}
    for bar in benchmark_bars:
        index[bar.date] = BenchmarkQuote(open=bar.open, close=bar.close)
    return index
