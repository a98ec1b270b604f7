"""
feature-core: pure feature derivation over daily bar series.

No I/O, no network, no side effects. Consumes instrument and benchmark bars,
produces EnrichedRows. Fully deterministic and unit-testable.
"""

from feature_core.contracts import (
    COLUMNS,
    Bar,
    BenchmarkQuote,
    EnrichedRow,
)
from feature_core.date_index import build_date_index
from feature_core.feature_engine import derive_features, sort_rows

__all__ = [
    "Bar",
    "BenchmarkQuote",
    "build_date_index",
    "COLUMNS",
    "derive_features",
    "EnrichedRow",
    "sort_rows",
]
