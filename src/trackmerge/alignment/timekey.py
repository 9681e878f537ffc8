"""
Hourly time keys.

A time key is a timestamp truncated to the hour and rendered as
``MM/DD/YYYY HH:00``. Equal keys mean the same alignment group.
"""

from datetime import datetime

import pandas as pd

from trackmerge.core.cells import Cell, is_number, is_zero
from trackmerge.ingestion.parser import parse_timestamp

TIME_KEY_FORMAT = "%m/%d/%Y %H:00"


def to_timestamp(cell: Cell) -> pd.Timestamp | None:
    """
    Interpret a time cell as a timestamp.

    Numbers are epoch milliseconds. Null, empty text and zero are
    never timestamps.

    Args:
        cell: Cell from a table's time column.

    Returns:
        Timestamp, or None if the cell is not a valid date.
    """
    if cell is None or cell == "" or is_zero(cell):
        return None
    if is_number(cell):
        try:
            parsed = pd.to_datetime(cell, unit="ms", errors="coerce")
        except (ValueError, OverflowError):
            return None
        return None if pd.isna(parsed) else parsed
    if isinstance(cell, str):
        return parse_timestamp(cell)
    return None


def format_time_key(timestamp: pd.Timestamp) -> str:
    """Render a timestamp as its hourly key, on its own wall clock."""
    return f"{timestamp.month:02d}/{timestamp.day:02d}/{timestamp.year:04d} {timestamp.hour:02d}:00"


def time_key(cell: Cell) -> str | None:
    """
    Derive the hourly key of a time cell.

    Args:
        cell: Cell from a table's time column.

    Returns:
        Key like ``01/01/2025 08:00``, or None for unparseable cells.
    """
    timestamp = to_timestamp(cell)
    if timestamp is None:
        return None
    return format_time_key(timestamp)


def parse_time_key(key: str) -> datetime:
    """Parse a key back into a naive datetime (for chronological sorting)."""
    return datetime.strptime(key, TIME_KEY_FORMAT)
