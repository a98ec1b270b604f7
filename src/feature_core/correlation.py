"""
Rolling Pearson correlation between volume and close.

r = sum((v - v_mean) * (p - p_mean)) / sqrt(sum((v - v_mean)^2) * sum((p - p_mean)^2))

A degenerate window (zero variance on either side, or a NaN result) is
reported as 0.0. Bars before the window is valid stay None, so "not yet
computable" and "computed as zero" remain distinguishable.

Pure functions; no I/O.
"""

from __future__ import annotations

import math
from typing import Sequence

CORR_WINDOW = 7


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation of two equal-length samples; 0.0 when undefined."""
    n = len(xs)
    if n == 0:
        return 0.0
    x_mean = sum(xs) / n
    y_mean = sum(ys) / n
    num = 0.0
    x_ss = 0.0
    y_ss = 0.0
    for x, y in zip(xs, ys):
        dx = x - x_mean
        dy = y - y_mean
        num += dx * dy
        x_ss += dx * dx
        y_ss += dy * dy
    den = math.sqrt(x_ss * y_ss)
    if den == 0:
        return 0.0
    r = num / den
    if math.isnan(r):
        return 0.0
    return r


def rolling_corr(
    volumes: Sequence[float],
    closes: Sequence[float],
    window: int = CORR_WINDOW,
) -> list[float | None]:
    """Correlation over positions i-window+1..i for every i >= window."""
    out: list[float | None] = [None] * len(closes)
    for i in range(window, len(closes)):
        lo = i - window + 1
        out[i] = pearson(volumes[lo : i + 1], closes[lo : i + 1])
    return out
