"""
One-shot table writer. The file appears complete or not at all.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from feature_core.contracts import COLUMNS, EnrichedRow

from export.table import format_table

logger = logging.getLogger("barfeat.export")


def _umask_mode() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


def render_rows(rows: Sequence[EnrichedRow], columns: Sequence[str] = COLUMNS) -> str:
    """Render enriched rows to CSV text in the fixed column order."""
    return format_table(columns, (r.as_record() for r in rows))


def write_atomic(path: str | Path, content: str) -> Path:
    """Write *content* (UTF-8) to a temp file next to *path*, then rename over it.

    The file gets the mode a plain ``open()`` would give it under the current umask.
    """
    target = Path(path).resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmp_name, _umask_mode())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d bytes to %s", len(content.encode("utf-8")), target)
    return target


def write_rows(path: str | Path, rows: Sequence[EnrichedRow]) -> Path:
    return write_atomic(path, render_rows(rows))
