"""
Close-to-close relative price change over N positions.

Windows count bars, not calendar days: "7d" is seven trading positions and
spans more than a week across weekends and holidays. Pure functions; no I/O.
"""

from __future__ import annotations

from typing import Sequence

from feature_core.numeric import ieee_div

PRICE_CHANGE_WINDOWS: tuple[int, ...] = (1, 7, 30, 365)


def price_change(closes: Sequence[float], n: int) -> list[float | None]:
    """(close[i] - close[i-n]) / close[i-n] for i >= n; None before that.

    A zero base close yields inf/NaN rather than an error.
    """
    out: list[float | None] = [None] * len(closes)
    for i in range(n, len(closes)):
        prev = closes[i - n]
        out[i] = ieee_div(closes[i] - prev, prev)
    return out
