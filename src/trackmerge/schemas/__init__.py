"""
Schema definitions using Pandera for data validation.

Frames handed to charting and statistics consumers are validated
against these contracts.
"""

from trackmerge.schemas.merged import MergedTableSchema
from trackmerge.schemas.summary import SeriesSchema, SummarySchema

__all__ = ["MergedTableSchema", "SeriesSchema", "SummarySchema"]
