"""Tests for the data layer: date filter, file fetcher, concurrent pair fetch."""

import threading
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from conftest import make_bars
from data import get_fetcher
from data.fetcher import FetchResult, fetch_pair
from data.file_fetcher import FileBarFetcher, bar_from_record, parse_time, symbol_filename
from data.filters import filter_by_date, sort_bars
from config.loader import DataConfig
from feature_core.contracts import Bar


class StaticFetcher:
    """Serves fixed bars per symbol and records which threads served them."""

    def __init__(self, bars_by_symbol: dict[str, list[Bar]], fail: set[str] | None = None) -> None:
        self._bars = bars_by_symbol
        self._fail = fail or set()
        self.calls: list[tuple[str, int]] = []

    def fetch(self, symbol, timeframe, *, start=None, end=None, limit=None) -> FetchResult:
        self.calls.append((symbol, threading.get_ident()))
        if symbol in self._fail:
            raise ConnectionError(f"feed down for {symbol}")
        bars = self._bars.get(symbol, [])
        if limit is not None:
            bars = bars[-limit:]
        return FetchResult(bars=bars, symbol=symbol, timeframe=timeframe)


# ---------------------------------------------------------------------------
# Date filter
# ---------------------------------------------------------------------------


class TestFilterByDate:
    def test_inclusive_bounds(self) -> None:
        bars = make_bars([1.0, 2.0, 3.0, 4.0, 5.0])  # 2024-01-01 .. 2024-01-05
        out = filter_by_date(bars, date(2024, 1, 2), date(2024, 1, 4))
        assert [b.date for b in out] == ["2024-01-02", "2024-01-03", "2024-01-04"]

    def test_unbounded(self) -> None:
        bars = make_bars([1.0, 2.0])
        assert filter_by_date(bars) == bars

    def test_end_includes_late_timestamp_on_end_date(self) -> None:
        late = Bar(1.0, 1.0, 1.0, 1.0, 0.0, datetime(2024, 1, 4, 21, 0, tzinfo=timezone.utc), "SPY")
        assert filter_by_date([late], None, date(2024, 1, 4)) == [late]

    def test_everything_filtered(self) -> None:
        bars = make_bars([1.0, 2.0])
        assert filter_by_date(bars, date(2030, 1, 1), None) == []

    def test_sort_bars(self) -> None:
        bars = make_bars([1.0, 2.0, 3.0])
        assert sort_bars(list(reversed(bars))) == bars


# ---------------------------------------------------------------------------
# File fetcher
# ---------------------------------------------------------------------------


class TestFileFetcher:
    def test_symbol_filename(self) -> None:
        assert symbol_filename("CSEMA:MASI") == "CSEMA_MASI.csv"
        assert symbol_filename("^GSPC") == "_GSPC.csv"
        assert symbol_filename("BRK.B") == "BRK.B.csv"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1704067200", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            ("1704067200000", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            ("2024-01-01", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            ("2024-01-01T05:00:00Z", datetime(2024, 1, 1, 5, tzinfo=timezone.utc)),
        ],
    )
    def test_parse_time(self, raw: str, expected: datetime) -> None:
        assert parse_time(raw) == expected

    def test_record_aliases_and_fallbacks(self) -> None:
        bar = bar_from_record({"time": "1704067200", "c": "10.5", "max": "11", "vol": ""}, "X")
        assert bar.close == 10.5
        assert bar.open == 10.5
        assert bar.high == 11.0
        assert bar.low == 10.5
        assert bar.volume == 0.0

    def test_nan_volume_is_zero(self) -> None:
        bar = bar_from_record({"date": "2024-01-01", "close": "10", "volume": "nan"}, "X")
        assert bar.volume == 0.0

    def test_record_without_time_raises(self) -> None:
        with pytest.raises(ValueError, match="no time field"):
            bar_from_record({"close": "1"}, "X")

    def test_fetch_sorts_and_limits(self, tmp_path: Path) -> None:
        (tmp_path / "SPY.csv").write_text(
            "Date,Open,High,Low,Close,Volume\n"
            "2024-01-03,3,3,3,3,300\n"
            "2024-01-01,1,1,1,1,100\n"
            "2024-01-02,2,2,2,2,200\n"
        )
        result = FileBarFetcher(tmp_path).fetch("SPY", "1d", limit=2)
        assert [b.date for b in result.bars] == ["2024-01-02", "2024-01-03"]
        assert result.raw_sample == {
            "date": "2024-01-03", "open": "3", "high": "3", "low": "3", "close": "3", "volume": "300",
        }

    def test_cursor_is_not_accepted(self, tmp_path: Path) -> None:
        (tmp_path / "SPY.csv").write_text("date,close\n2024-01-01,1\n")
        with pytest.raises(TypeError):
            FileBarFetcher(tmp_path).fetch("SPY", "1d", cursor="next")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="No bar file"):
            FileBarFetcher(tmp_path).fetch("NOPE", "1d")

    def test_get_fetcher_file_source(self, tmp_path: Path) -> None:
        fetcher = get_fetcher(DataConfig(source="file", file_dir=str(tmp_path)))
        assert isinstance(fetcher, FileBarFetcher)

    def test_get_fetcher_unknown_source(self) -> None:
        with pytest.raises(ValueError, match="Unknown data source"):
            get_fetcher(DataConfig(source="bloomberg"))


# ---------------------------------------------------------------------------
# Concurrent pair fetch
# ---------------------------------------------------------------------------


class TestFetchPair:
    def test_returns_instrument_then_benchmark(self) -> None:
        fetcher = StaticFetcher({
            "SPY": make_bars([1.0, 2.0]),
            "^GSPC": make_bars([10.0, 20.0, 30.0], symbol="^GSPC"),
        })
        instrument, benchmark = fetch_pair(fetcher, "SPY", "^GSPC", "1d")
        assert instrument.symbol == "SPY"
        assert len(instrument.bars) == 2
        assert benchmark.symbol == "^GSPC"
        assert len(benchmark.bars) == 3

    def test_runs_off_the_calling_thread(self) -> None:
        fetcher = StaticFetcher({"SPY": [], "^GSPC": []})
        fetch_pair(fetcher, "SPY", "^GSPC", "1d")
        assert {s for s, _ in fetcher.calls} == {"SPY", "^GSPC"}
        assert all(tid != threading.get_ident() for _, tid in fetcher.calls)

    def test_passes_limit(self) -> None:
        fetcher = StaticFetcher({"SPY": make_bars([1.0, 2.0, 3.0]), "^GSPC": []})
        instrument, _ = fetch_pair(fetcher, "SPY", "^GSPC", "1d", limit=1)
        assert [b.close for b in instrument.bars] == [3.0]

    def test_failure_propagates(self) -> None:
        fetcher = StaticFetcher({"SPY": make_bars([1.0])}, fail={"^GSPC"})
        with pytest.raises(ConnectionError, match="feed down"):
            fetch_pair(fetcher, "SPY", "^GSPC", "1d")

    def test_result_carries_no_pagination_state(self) -> None:
        fetcher = StaticFetcher({"SPY": make_bars([1.0]), "^GSPC": []})
        instrument, _ = fetch_pair(fetcher, "SPY", "^GSPC", "1d")
        assert not hasattr(instrument, "next_cursor")
