"""Pandera schemas for statistics and chart series derived from merges."""

import pandera.pandas as pa
from pandera.typing import Series


class SummarySchema(pa.DataFrameModel):
    """Threshold summary, one row per measurement column."""

    measurement: Series[str] = pa.Field(description="Merged column header")
    data_points: Series[int] = pa.Field(ge=0)
    less_than_count: Series[int] = pa.Field(ge=0)
    less_than_pct: Series[float] = pa.Field(ge=0.0, le=100.0)
    greater_than_count: Series[int] = pa.Field(ge=0)
    greater_than_pct: Series[float] = pa.Field(ge=0.0, le=100.0)
    avg_positive: Series[float] = pa.Field(nullable=True, gt=0.0)
    avg_negative: Series[float] = pa.Field(nullable=True, lt=0.0)

    class Config:
        """Schema configuration."""

        name = "SummarySchema"
        strict = True
        coerce = True


class SeriesSchema(pa.DataFrameModel):
    """Chart series with zero and missing readings removed."""

    time: Series[str] = pa.Field()
    value: Series[float] = pa.Field(ne=0.0)

    class Config:
        """Schema configuration."""

        name = "SeriesSchema"
        strict = True
        coerce = True
