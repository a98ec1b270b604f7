"""
Table export: render enriched rows as CSV and write them in one shot.
"""

from export.table import escape_field, format_table
from export.writer import render_rows, write_atomic, write_rows

__all__ = [
    "escape_field",
    "format_table",
    "render_rows",
    "write_atomic",
    "write_rows",
]
