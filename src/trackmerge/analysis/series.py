"""Chart series with gaps removed."""

import pandas as pd

from trackmerge.core.cells import to_number
from trackmerge.merge.combiner import MergedTable
from trackmerge.schemas.summary import SeriesSchema


def chart_series(merged: MergedTable, column: str) -> pd.DataFrame:
    """
    Extract a time/value series for one merged column.

    Zero, null and non-numeric cells are dropped so charts do not
    plot placeholder readings.

    Args:
        merged: Merged table.
        column: Header of the column to extract.

    Returns:
        DataFrame with ``time`` and ``value`` columns.
    """
    times = merged.column("Time")
    values = [to_number(v) for v in merged.column(column)]
    points = [
        (str(t), float(v)) for t, v in zip(times, values, strict=True) if v is not None and v != 0
    ]
    df = pd.DataFrame(points, columns=["time", "value"])
    return SeriesSchema.validate(df)
