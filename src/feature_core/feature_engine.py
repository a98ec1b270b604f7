"""
Feature Engine: instrument bars + benchmark bars -> EnrichedRows.

This is the single entry point of feature-core. Steps run in a fixed order
because later passes read fields written by earlier ones:

    index benchmark -> allocate rows -> join benchmark -> price change
    -> volume averages -> volume ratios -> correlation -> high-volume impact

Pure function; no I/O, never raises on numeric edge cases. A short history
produces a sparser table, not an error.
"""

from __future__ import annotations

from typing import Sequence

from feature_core.contracts import Bar, EnrichedRow
from feature_core.correlation import CORR_WINDOW, rolling_corr
from feature_core.date_index import build_date_index
from feature_core.price_change import PRICE_CHANGE_WINDOWS, price_change
from feature_core.volume import (
    VOLUME_AVG_WINDOWS,
    high_volume_impact,
    rolling_volume_avg,
    volume_ratio,
)


def derive_features(bars: Sequence[Bar], benchmark_bars: Sequence[Bar]) -> list[EnrichedRow]:
    """Derive every feature column for *bars*.

    Parameters
    ----------
    bars:
        Instrument history, oldest first. Window lookbacks are positional.
    benchmark_bars:
        Benchmark history, oldest first; joined by UTC calendar date.

    Returns
    -------
    list[EnrichedRow]
        One row per input bar, same order. Empty when *bars* is empty.
    """
    if not bars:
        return []

    index = build_date_index(benchmark_bars)
    rows = [EnrichedRow(bar=b) for b in bars]

    for row in rows:
        quote = index.get(row.date)
        if quote is not None:
            row.masi_open = quote.open
            row.masi_close = quote.close

    opens = [b.open for b in bars]
    closes = [b.close for b in bars]
    volumes = [b.volume for b in bars]

    for n in PRICE_CHANGE_WINDOWS:
        _assign(rows, f"price_change_{n}d", price_change(closes, n))

    avgs = {w: rolling_volume_avg(volumes, w) for w in VOLUME_AVG_WINDOWS}
    for w, values in avgs.items():
        _assign(rows, f"volume_{w}d_avg", values)

    vol_vs_7d = volume_ratio(volumes, avgs[7])
    _assign(rows, "vol_vs_7d_avg", vol_vs_7d)
    _assign(rows, "vol_vs_90d_avg", volume_ratio(volumes, avgs[90], zero_avg_fallback=1.0))

    _assign(rows, "volume_price_corr_7d", rolling_corr(volumes, closes, CORR_WINDOW))

    _assign(rows, "high_volume_impact", high_volume_impact(opens, closes, vol_vs_7d))

    return rows


def _assign(rows: list[EnrichedRow], name: str, values: Sequence[float | None]) -> None:
    """Write computed *values* into field *name*; None leaves the default in place."""
    for row, value in zip(rows, values):
        if value is not None:
            setattr(row, name, value)


def sort_rows(rows: list[EnrichedRow]) -> list[EnrichedRow]:
    """Rows ordered by bar open time, oldest first (stable)."""
    return sorted(rows, key=lambda r: r.timestamp)
