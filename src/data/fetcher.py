"""
Fetch OHLCV bars from a data source. Configurable adapter; sync per fetch,
with the instrument/benchmark pair fetched concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from feature_core.contracts import Bar

logger = logging.getLogger("barfeat.data")


@dataclass
class FetchResult:
    """Result of a fetch: bars (oldest first) plus the first raw provider record."""

    bars: list[Bar]
    symbol: str
    timeframe: str
    # first raw provider record, kept only for debug diagnostics
    raw_sample: dict | None = None


class BarFetcher(Protocol):
    """Protocol for bar fetchers. Implement per provider (Yahoo, Alpaca, files)."""

    def fetch(
        self,
        symbol: str,
        timeframe: str,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> FetchResult:
        """Fetch bars; normalize timestamps to UTC, oldest first. Returns FetchResult."""
        ...


async def fetch_pair_async(
    fetcher: BarFetcher,
    symbol: str,
    benchmark_symbol: str,
    timeframe: str,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int | None = None,
) -> tuple[FetchResult, FetchResult]:
    """Fetch instrument and benchmark concurrently; the first failure propagates."""
    instrument, benchmark = await asyncio.gather(
        asyncio.to_thread(fetcher.fetch, symbol, timeframe, start=start, end=end, limit=limit),
        asyncio.to_thread(fetcher.fetch, benchmark_symbol, timeframe, start=start, end=end, limit=limit),
    )
    return instrument, benchmark


def fetch_pair(
    fetcher: BarFetcher,
    symbol: str,
    benchmark_symbol: str,
    timeframe: str,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int | None = None,
) -> tuple[FetchResult, FetchResult]:
    """Blocking wrapper around :func:`fetch_pair_async`."""
    logger.info("Fetching %s and %s (%s) ...", symbol, benchmark_symbol, timeframe)
    return asyncio.run(
        fetch_pair_async(
            fetcher, symbol, benchmark_symbol, timeframe, start=start, end=end, limit=limit
        )
    )
