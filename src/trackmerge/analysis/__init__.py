"""
Analysis of merged tables for reports and charts.

Threshold summaries per measurement column and gap-removed series.
"""

from trackmerge.analysis.series import chart_series
from trackmerge.analysis.summary import select_columns, summarize

__all__ = ["chart_series", "select_columns", "summarize"]
