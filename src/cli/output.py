"""
Human-readable run output for the terminal.

Summary lines are always printed; the diagnostics are printed only in debug
mode and never touch the computed rows.
"""

from __future__ import annotations

from typing import Sequence

from data.fetcher import FetchResult
from feature_core.contracts import Bar, EnrichedRow


def _dates(bars: Sequence[Bar] | Sequence[EnrichedRow], n: int) -> list[str]:
    return [b.date for b in bars[:n]]


def format_raw_sample(result: FetchResult) -> str:
    """Field names and first raw record of a fetch, as returned by the provider."""
    if not result.raw_sample:
        return f"DEBUG {result.symbol}: no raw records"
    lines = [
        f"DEBUG {result.symbol} keys: {sorted(str(k) for k in result.raw_sample)}",
        f"DEBUG {result.symbol} sample: {result.raw_sample}",
    ]
    return "\n".join(lines)


def format_fetch_debug(instrument: FetchResult, benchmark: FetchResult) -> str:
    """Bar counts and first dates of both series, to check alignment."""
    lines = [
        f"Fetched {len(instrument.bars)} bars for {instrument.symbol}",
        f"Fetched {len(benchmark.bars)} bars for {benchmark.symbol}",
        f"First instrument dates: {_dates(instrument.bars, 3)}",
        f"First benchmark dates : {_dates(benchmark.bars, 3)}",
    ]
    return "\n".join(lines)


def format_summary(rows: Sequence[EnrichedRow], path: str) -> str:
    return "\n".join([
        f"OK -> {path}",
        f"Rows: {len(rows)} | From {rows[0].date} to {rows[-1].date}",
    ])


def format_benchmark_coverage(rows: Sequence[EnrichedRow], benchmark_bars: Sequence[Bar]) -> str:
    """How many rows joined a benchmark quote, with a sample or a date comparison."""
    joined = [r for r in rows if r.has_benchmark()]
    lines = [f"Rows with benchmark data: {len(joined)}/{len(rows)}"]
    if joined:
        first = joined[0]
        lines.append(
            f"Sample row with benchmark data: date={first.date} "
            f"masi_open={first.masi_open} masi_close={first.masi_close}"
        )
    else:
        lines.append("No benchmark data found in any rows")
        lines.append(f"Available dates in instrument data: {_dates(rows, 5)}")
        lines.append(f"Available dates in benchmark data: {_dates(benchmark_bars, 5)}")
    return "\n".join(lines)
