"""
Temporal alignment of parsed tables.

Groups readings by the hour they were taken in and keeps one
representative reading per hour and column.
"""

from trackmerge.alignment.aligner import (
    AlignedTable,
    SkippedRow,
    align,
    group_by_hour,
    pick_representative,
)
from trackmerge.alignment.timekey import TIME_KEY_FORMAT, parse_time_key, time_key

__all__ = [
    "TIME_KEY_FORMAT",
    "AlignedTable",
    "SkippedRow",
    "align",
    "group_by_hour",
    "parse_time_key",
    "pick_representative",
    "time_key",
]
