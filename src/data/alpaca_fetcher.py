"""
Alpaca bar fetcher: BarFetcher backed by the alpaca-py market data client.

Equities only; index benchmarks such as ``^GSPC`` need the Yahoo or file
source. The free tier serves IEX data, SIP needs a paid subscription.
"""

import logging
from datetime import datetime, timezone

from feature_core.contracts import Bar

from data.fetcher import FetchResult

logger = logging.getLogger("barfeat.data.alpaca")

# timeframe -> (TimeFrameUnit attribute, amount)
SUPPORTED_TIMEFRAMES = {
    "1h": ("Hour", 1),
    "1d": ("Day", 1),
    "1w": ("Week", 1),
}

_SAMPLE_FIELDS = ("timestamp", "open", "high", "low", "close", "volume", "trade_count", "vwap")


def _alpaca_timeframe(timeframe: str):
    from alpaca.data.timeframe import TimeFrame, TimeFrameUnit

    try:
        unit_name, amount = SUPPORTED_TIMEFRAMES[timeframe]
    except KeyError:
        raise ValueError(
            f"Unsupported timeframe '{timeframe}'. Supported: {sorted(SUPPORTED_TIMEFRAMES)}"
        ) from None
    return TimeFrame(amount, getattr(TimeFrameUnit, unit_name))


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _to_bar(raw, symbol: str) -> Bar:
    return Bar(
        open=float(raw.open),
        high=float(raw.high),
        low=float(raw.low),
        close=float(raw.close),
        volume=float(raw.volume or 0),
        timestamp=_as_utc(raw.timestamp),
        symbol=symbol,
    )


class AlpacaBarFetcher:
    """Stock bars from ``StockHistoricalDataClient``; keys come from AppConfig."""

    def __init__(self, api_key: str, api_secret: str, *, feed: str = "iex") -> None:
        if not api_key or not api_secret:
            raise ValueError(
                "Alpaca API key and secret are required. "
                "Set APCA_API_KEY_ID and APCA_API_SECRET_KEY environment variables."
            )
        try:
            from alpaca.data.historical import StockHistoricalDataClient
        except ImportError:
            raise ImportError(
                "alpaca-py is required for the alpaca source. "
                "Install with: pip install 'bar-features[data]'"
            )
        self._client = StockHistoricalDataClient(api_key, api_secret)
        self._feed = feed.lower()

    def fetch(
        self,
        symbol: str,
        timeframe: str,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> FetchResult:
        """Request the whole range, then keep the newest ``limit`` bars."""
        tf = _alpaca_timeframe(timeframe)

        from alpaca.data.enums import DataFeed
        from alpaca.data.requests import StockBarsRequest

        response = self._client.get_stock_bars(
            StockBarsRequest(
                symbol_or_symbols=symbol,
                timeframe=tf,
                start=start,
                end=end,
                feed=DataFeed(self._feed),
            )
        )
        by_symbol = response.data if hasattr(response, "data") else response
        raw_bars = list(by_symbol.get(symbol, []))

        bars = sorted((_to_bar(raw, symbol) for raw in raw_bars), key=lambda b: b.timestamp)
        if limit is not None:
            bars = bars[-limit:]

        sample = None
        if raw_bars:
            sample = {name: getattr(raw_bars[0], name, None) for name in _SAMPLE_FIELDS}

        logger.info("Fetched %d bars for %s %s (feed=%s)", len(bars), symbol, timeframe, self._feed)
        return FetchResult(
            bars=bars,
            symbol=symbol,
            timeframe=timeframe,
            raw_sample=sample,
        )
