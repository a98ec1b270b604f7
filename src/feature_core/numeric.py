"""
Float helpers with IEEE-754 division semantics.

Python raises on ``x / 0``; the feature passes instead need the IEEE result
(+inf, -inf or NaN) so a zero denominator degrades one cell, never the run.
"""

from __future__ import annotations

import math


def ieee_div(num: float, den: float) -> float:
    """``num / den`` returning +/-inf or NaN instead of raising on zero."""
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.nan
        # sign of a zero denominator matters: 1 / -0.0 == -inf
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den


def is_nan(value: float | None) -> bool:
    return isinstance(value, float) and math.isnan(value)
