"""
Data contracts for feature-core: Bar, BenchmarkQuote, EnrichedRow.

feature-core consumes Bar sequences and produces EnrichedRow sequences.
No I/O; these are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any

# Output column order consumed by downstream tools. Do not reorder.
COLUMNS: tuple[str, ...] = (
    "date",
    "open",
    "high",
    "low",
    "close",
    "volume",
    "masi_open",
    "masi_close",
    "taker_buy_base",
    "sell_volume",
    "price_change_1d",
    "price_change_7d",
    "price_change_30d",
    "price_change_365d",
    "volume_7d_avg",
    "volume_90d_avg",
    "buy_sell_ratio",
    "vol_vs_7d_avg",
    "vol_vs_90d_avg",
    "volume_price_corr_7d",
    "high_volume_impact",
)


def date_key(ts: datetime) -> str:
    """UTC calendar date of *ts* as YYYY-MM-DD. Naive datetimes are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).date().isoformat()


@dataclass(frozen=True)
class Bar:
    """Daily OHLCV bar; timestamp in UTC. No indicator fields."""

    open: float
    high: float
    low: float
    close: float
    volume: float
    timestamp: datetime
    symbol: str

    @property
    def date(self) -> str:
        return date_key(self.timestamp)


@dataclass(frozen=True)
class BenchmarkQuote:
    """Benchmark open/close for one calendar date."""

    open: float
    close: float


@dataclass
class EnrichedRow:
    """A Bar plus every derived field.

    All derived fields start as ``None`` ("not computable"); the feature
    engine fills them pass by pass. ``high_volume_impact`` is the only field
    that is always assigned a number.

    The taker/sell fields are reserved columns: no source populates them,
    they stay ``None`` so the output schema is stable.
    """

    bar: Bar
    masi_open: float | None = None
    masi_close: float | None = None
    taker_buy_base: float | None = None
    sell_volume: float | None = None
    buy_sell_ratio: float | None = None
    price_change_1d: float | None = None
    price_change_7d: float | None = None
    price_change_30d: float | None = None
    price_change_365d: float | None = None
    volume_7d_avg: float | None = None
    volume_90d_avg: float | None = None
    vol_vs_7d_avg: float | None = None
    vol_vs_90d_avg: float | None = None
    volume_price_corr_7d: float | None = None
    high_volume_impact: float | None = None

    @property
    def timestamp(self) -> datetime:
        return self.bar.timestamp

    @property
    def date(self) -> str:
        return self.bar.date

    def has_benchmark(self) -> bool:
        return self.masi_open is not None and self.masi_close is not None

    def as_record(self) -> dict[str, Any]:
        """Flatten to a mapping keyed by output column name."""
        record: dict[str, Any] = {
            "date": self.date,
            "open": self.bar.open,
            "high": self.bar.high,
            "low": self.bar.low,
            "close": self.bar.close,
            "volume": self.bar.volume,
        }
        for f in fields(self):
            if f.name != "bar":
                record[f.name] = getattr(self, f.name)
        return {col: record[col] for col in COLUMNS}
