"""
Yahoo Finance bar fetcher: implements BarFetcher protocol using yfinance.

Covers equities and indices (e.g. ``^GSPC``), so it is the default source
for instrument/benchmark pairs. Daily bars are stamped at UTC midnight of
their exchange session date, so the calendar-date join does not drift for
exchanges east of UTC.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone

from feature_core.contracts import Bar

from data.fetcher import FetchResult

logger = logging.getLogger("barfeat.data.yahoo")

_INTERVAL_MAP = {
    "1h": "1h",
    "1d": "1d",
    "1w": "1wk",
}

_DAILY_INTERVALS = {"1d", "1wk"}


def _to_float(value, default: float) -> float:
    if value is None:
        return default
    value = float(value)
    if math.isnan(value):
        return default
    return value


def _bar_timestamp(ts, interval: str) -> datetime:
    if interval in _DAILY_INTERVALS:
        d = ts.date()
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class YahooBarFetcher:
    """Fetch OHLCV history from Yahoo Finance via ``yfinance.Ticker.history``."""

    def __init__(self) -> None:
        try:
            import yfinance
        except ImportError:
            raise ImportError(
                "yfinance is required for YahooBarFetcher. Install with: pip install yfinance"
            )
        self._yf = yfinance

    def fetch(
        self,
        symbol: str,
        timeframe: str,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> FetchResult:
        """Fetch bars; keeps the last ``limit`` bars. ``end`` is inclusive."""
        if timeframe not in _INTERVAL_MAP:
            raise ValueError(
                f"Unsupported timeframe '{timeframe}'. Supported: {list(_INTERVAL_MAP.keys())}"
            )
        interval = _INTERVAL_MAP[timeframe]
        kwargs: dict = {"interval": interval, "auto_adjust": False}
        if start is None and end is None:
            kwargs["period"] = "max"
        else:
            if start is not None:
                kwargs["start"] = start.strftime("%Y-%m-%d")
            if end is not None:
                # yfinance treats end as exclusive
                kwargs["end"] = (end + timedelta(days=1)).strftime("%Y-%m-%d")

        history = self._yf.Ticker(symbol).history(**kwargs)

        bars: list[Bar] = []
        raw_sample = None
        if history is not None and not history.empty:
            for ts, row in history.iterrows():
                if raw_sample is None:
                    raw_sample = {"Date": ts, **dict(row)}
                close = _to_float(row.get("Close"), math.nan)
                if math.isnan(close):
                    continue
                bars.append(
                    Bar(
                        open=_to_float(row.get("Open"), close),
                        high=_to_float(row.get("High"), close),
                        low=_to_float(row.get("Low"), close),
                        close=close,
                        volume=_to_float(row.get("Volume"), 0.0),
                        timestamp=_bar_timestamp(ts, interval),
                        symbol=symbol,
                    )
                )
        bars.sort(key=lambda b: b.timestamp)
        if limit is not None:
            bars = bars[-limit:]

        logger.info("Fetched %d bars for %s %s", len(bars), symbol, timeframe)
        return FetchResult(bars=bars, symbol=symbol, timeframe=timeframe, raw_sample=raw_sample)
