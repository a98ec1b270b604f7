"""
Offline bar fetcher: reads one CSV export per symbol from a directory.

File name is the symbol with anything outside ``[A-Za-z0-9._-]`` replaced by
``_`` (``CSEMA:MASI`` -> ``CSEMA_MASI.csv``). Header names are matched
case-insensitively against common aliases so exports from different charting
tools load without editing:

  time   : time | timestamp | open_time | date | datetime
  open   : open | o            (falls back to close)
  high   : high | h | max      (falls back to close)
  low    : low | l | min       (falls back to close)
  close  : close | c           (falls back to open)
  volume : volume | vol | v    (missing or nan -> 0)

Numeric times below 2e10 are epoch seconds, larger values epoch milliseconds.
"""

from __future__ import annotations

import csv
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from feature_core.contracts import Bar
from feature_core.numeric import is_nan

from data.fetcher import FetchResult

logger = logging.getLogger("barfeat.data.file")

_ALIASES = {
    "time": ("time", "timestamp", "open_time", "date", "datetime"),
    "open": ("open", "o"),
    "high": ("high", "h", "max"),
    "low": ("low", "l", "min"),
    "close": ("close", "c"),
    "volume": ("volume", "vol", "v"),
}

SECONDS_EPOCH_LIMIT = 2e10


def symbol_filename(symbol: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", symbol) + ".csv"


def parse_time(value: str) -> datetime:
    """Parse an epoch (seconds or milliseconds) or ISO-8601 value to aware UTC."""
    value = value.strip()
    try:
        num = float(value)
    except ValueError:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if ts.tzinfo is None:
            return ts.replace(tzinfo=timezone.utc)
        return ts.astimezone(timezone.utc)
    if num < SECONDS_EPOCH_LIMIT:
        num *= 1000
    return datetime.fromtimestamp(num / 1000, tz=timezone.utc)


def _pick(row: dict[str, str], field: str) -> float | None:
    for alias in _ALIASES[field]:
        raw = row.get(alias)
        if raw is not None and raw.strip() != "":
            return float(raw)
    return None


def bar_from_record(row: dict[str, str], symbol: str) -> Bar:
    """Build a Bar from a raw record with lower-cased keys, applying field fallbacks."""
    time_raw = next((row[a] for a in _ALIASES["time"] if row.get(a)), None)
    if time_raw is None:
        raise ValueError(f"Record has no time field: {sorted(row)}")
    open_ = _pick(row, "open")
    close = _pick(row, "close")
    if close is None:
        close = open_
    if close is None:
        raise ValueError(f"Record has neither close nor open: {sorted(row)}")
    if open_ is None:
        open_ = close
    high = _pick(row, "high")
    low = _pick(row, "low")
    volume = _pick(row, "volume")
    return Bar(
        open=open_,
        high=close if high is None else high,
        low=close if low is None else low,
        close=close,
        volume=0.0 if volume is None or is_nan(volume) else volume,
        timestamp=parse_time(time_raw),
        symbol=symbol,
    )


class FileBarFetcher:
    """Serve bars from ``<directory>/<symbol>.csv``. Timeframe is not checked."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    def fetch(
        self,
        symbol: str,
        timeframe: str,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> FetchResult:
        path = self._dir / symbol_filename(symbol)
        if not path.exists():
            raise FileNotFoundError(f"No bar file for {symbol}: {path}")

        with open(path, newline="", encoding="utf-8") as f:
            records = [
                {k.strip().lower(): v for k, v in row.items() if k is not None}
                for row in csv.DictReader(f)
            ]
        bars = sorted((bar_from_record(r, symbol) for r in records), key=lambda b: b.timestamp)
        if limit is not None:
            bars = bars[-limit:]

        logger.info("Loaded %d bars for %s from %s", len(bars), symbol, path)
        return FetchResult(
            bars=bars,
            symbol=symbol,
            timeframe=timeframe,
            raw_sample=records[0] if records else None,
        )
