"""
Delimited-text rendering for enriched rows.

Missing values (None, NaN) render as empty fields.

Floats: whole values drop the fractional part ("1000"); infinities are spelled
"Infinity" / "-Infinity"; anything else is ``repr`` (1e-05 stays "1e-05").

A field containing a comma, double quote or newline is quoted with internal
quotes doubled.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from feature_core.numeric import is_nan

DELIMITER = ","


def _stringify(value: Any) -> str:
    if isinstance(value, float):
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # 1000.0 -> "1000" so whole volumes and prices stay compact
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def escape_field(value: Any) -> str:
    """Render one cell."""
    if value is None or is_nan(value):
        return ""
    s = _stringify(value)
    if DELIMITER in s or '"' in s or "\n" in s:
        return '"' + s.replace('"', '""') + '"'
    return s


def format_table(columns: Sequence[str], records: Iterable[Mapping[str, Any]]) -> str:
    """Header line plus one line per record, in *columns* order.

    Keys absent from a record render as empty fields. Every line, including
    the last, ends with a newline.
    """
    lines = [DELIMITER.join(escape_field(c) for c in columns)]
    for record in records:
        lines.append(DELIMITER.join(escape_field(record.get(c)) for c in columns))
    return "\n".join(lines) + "\n"
