"""
Threshold summary statistics.

For each selected measurement column, counts how many readings fall
below/above alarm thresholds and averages the positive and negative
readings separately. Null, empty and zero readings are not data points.
"""

import re
from collections.abc import Sequence

import numpy as np
import pandas as pd

from trackmerge.core.cells import Cell, to_number
from trackmerge.merge.combiner import MergedTable
from trackmerge.schemas.summary import SummarySchema
from trackmerge.utils.logging import get_logger

log = get_logger(__name__)

SUMMARY_COLUMNS = [
    "measurement",
    "data_points",
    "less_than_count",
    "less_than_pct",
    "greater_than_count",
    "greater_than_pct",
    "avg_positive",
    "avg_negative",
]


def select_columns(header: Sequence[str], pattern: str) -> list[str]:
    """
    Select merged column names matching a regex.

    The time column is never selected.

    Args:
        header: Merged header.
        pattern: Regular expression searched in each name.

    Returns:
        Matching names in header order.
    """
    regex = re.compile(pattern)
    return [name for name in header[1:] if regex.search(name)]


def readings(values: Sequence[Cell]) -> np.ndarray:
    """Numeric, non-zero readings of a column as a float array."""
    numbers = [to_number(v) for v in values]
    return np.array([n for n in numbers if n is not None and n != 0], dtype=float)


def _pct(count: int, total: int) -> float:
    return round(count / total * 100, 2) if total else 0.0


def summarize(
    merged: MergedTable,
    columns: Sequence[str],
    less_than: float | None = None,
    greater_than: float | None = None,
) -> pd.DataFrame:
    """
    Summarize readings of the given columns against thresholds.

    Args:
        merged: Merged table.
        columns: Column names to summarize; columns without any
            readings are left out.
        less_than: Count readings strictly below this value.
        greater_than: Count readings strictly above this value.

    Returns:
        DataFrame validated by SummarySchema.

    Raises:
        KeyError: If a column is not in the merged header.
    """
    records = []
    for name in columns:
        values = readings(merged.column(name))
        total = len(values)
        if total == 0:
            log.debug("Column has no readings", column=name)
            continue

        below = int((values < less_than).sum()) if less_than is not None else 0
        above = int((values > greater_than).sum()) if greater_than is not None else 0
        positive = values[values > 0]
        negative = values[values < 0]

        records.append(
            {
                "measurement": name,
                "data_points": total,
                "less_than_count": below,
                "less_than_pct": _pct(below, total),
                "greater_than_count": above,
                "greater_than_pct": _pct(above, total),
                "avg_positive": float(positive.mean()) if len(positive) else np.nan,
                "avg_negative": float(negative.mean()) if len(negative) else np.nan,
            }
        )

    df = pd.DataFrame(records, columns=SUMMARY_COLUMNS)
    log.info("Summarized columns", requested=len(columns), summarized=len(df))
    return SummarySchema.validate(df)
