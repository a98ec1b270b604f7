"""
Volume features: rolling averages, relative volume, high-volume impact.

Averages cover the trailing ``window`` bars *inclusive* of the current bar,
and are only emitted once at least ``window`` earlier bars exist (index >=
window). Pure functions; no I/O.
"""

from __future__ import annotations

from typing import Sequence

from feature_core.numeric import ieee_div, is_nan

VOLUME_AVG_WINDOWS: tuple[int, ...] = (7, 90)
HIGH_VOLUME_THRESHOLD = 1.5


def rolling_volume_avg(volumes: Sequence[float], window: int) -> list[float | None]:
    """Simple moving average of volume[i-window+1..i] for i >= window."""
    out: list[float | None] = [None] * len(volumes)
    for i in range(window, len(volumes)):
        out[i] = sum(volumes[i - window + 1 : i + 1]) / window
    return out


def volume_ratio(
    volumes: Sequence[float],
    averages: Sequence[float | None],
    *,
    zero_avg_fallback: float | None = None,
) -> list[float | None]:
    """volume[i] / averages[i] wherever the average exists.

    With ``zero_avg_fallback`` set, an average of zero or NaN is replaced by
    that value; without it, a zero average gives inf/NaN.
    """
    out: list[float | None] = [None] * len(volumes)
    for i, avg in enumerate(averages):
        if avg is None:
            continue
        if zero_avg_fallback is not None and (avg == 0 or is_nan(avg)):
            avg = zero_avg_fallback
        out[i] = ieee_div(volumes[i], avg)
    return out


def high_volume_impact(
    opens: Sequence[float],
    closes: Sequence[float],
    vol_rel: Sequence[float | None],
    threshold: float = HIGH_VOLUME_THRESHOLD,
) -> list[float]:
    """close - open on bars whose relative volume exceeds ``threshold``, else 0.

    Missing relative volume (early bars) and NaN never exceed the threshold.
    """
    out: list[float] = [0.0] * len(closes)
    for i, rel in enumerate(vol_rel):
        if rel is not None and rel > threshold:
            out[i] = closes[i] - opens[i]
    return out
