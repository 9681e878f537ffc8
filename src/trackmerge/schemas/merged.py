"""Pandera schema for merged tables converted to DataFrames."""

import pandera.pandas as pa
from pandera.typing import Series


class MergedTableSchema(pa.DataFrameModel):
    """
    Schema for a merged table.

    Only the time column is fixed; data and difference columns depend
    on the merged sources.
    """

    Time: Series[str] = pa.Field(
        nullable=False,
        unique=True,
        description="Raw first timestamp of the hour, or the hourly key",
    )

    class Config:
        """Schema configuration."""

        name = "MergedTableSchema"
        strict = False  # Data columns vary per merge
        coerce = False
