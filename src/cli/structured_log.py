"""
Structured JSON event logger.

Emits one JSON object per line to stderr so a run can be parsed by log
aggregators (Grafana Loki, CloudWatch, ELK) next to the human-readable
messages.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredEventLogger:
    """Emit structured JSON events to a stream (stderr by default)."""

    def __init__(
        self,
        symbol: str,
        *,
        enabled: bool = True,
        stream: Any = None,
    ) -> None:
        self._symbol = symbol
        self._enabled = enabled
        self._stream = stream or sys.stderr

    def _emit(self, event_type: str, **fields: Any) -> dict:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event_type,
            "symbol": self._symbol,
            **fields,
        }
        if self._enabled:
            self._stream.write(json.dumps(record, default=str) + "\n")
            self._stream.flush()
        return record

    def run_start(self, benchmark: str, source: str, start: str | None, end: str | None) -> dict:
        return self._emit(
            "run_start",
            benchmark=benchmark,
            source=source,
            start=start,
            end=end,
        )

    def fetch_complete(self, fetched: dict[str, int], filtered: dict[str, int]) -> dict:
        return self._emit("fetch_complete", fetched=fetched, filtered=filtered)

    def export_complete(self, path: str, rows: int, first: str, last: str, benchmark_rows: int) -> dict:
        return self._emit(
            "export_complete",
            path=path,
            rows=rows,
            first=first,
            last=last,
            benchmark_rows=benchmark_rows,
        )

    def error(self, message: str, detail: str = "") -> dict:
        return self._emit("error", message=message, detail=detail)
