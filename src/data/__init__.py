"""
Data layer: fetch OHLCV from a provider, normalize to UTC, filter by date.

Depends on feature_core.contracts for Bar; no dependency from feature_core back to data.
"""

from data.fetcher import BarFetcher, FetchResult, fetch_pair, fetch_pair_async
from data.file_fetcher import FileBarFetcher
from data.filters import filter_by_date, sort_bars

__all__ = [
    "BarFetcher",
    "FetchResult",
    "FileBarFetcher",
    "fetch_pair",
    "fetch_pair_async",
    "filter_by_date",
    "get_fetcher",
    "sort_bars",
]

SOURCES = ("yahoo", "alpaca", "file")


def get_alpaca_fetcher(api_key: str, api_secret: str):
    """Lazy import to avoid requiring alpaca-py when not used."""
    from data.alpaca_fetcher import AlpacaBarFetcher

    return AlpacaBarFetcher(api_key, api_secret)


def get_yahoo_fetcher():
    """Lazy import to avoid loading yfinance (and pandas) when not used."""
    from data.yahoo_fetcher import YahooBarFetcher

    return YahooBarFetcher()


def get_fetcher(data_cfg) -> BarFetcher:
    """Build the fetcher named by ``data_cfg.source``."""
    if data_cfg.source == "yahoo":
        return get_yahoo_fetcher()
    if data_cfg.source == "alpaca":
        return get_alpaca_fetcher(data_cfg.api_key, data_cfg.api_secret)
    if data_cfg.source == "file":
        return FileBarFetcher(data_cfg.file_dir)
    raise ValueError(f"Unknown data source '{data_cfg.source}'. Supported: {list(SOURCES)}")
