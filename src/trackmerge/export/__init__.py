"""
Export of merged tables to spreadsheet and CSV files.

Also provides the base64 handoff encoding used between pipeline
stages and rendering pages.
"""

from trackmerge.export.workbook import (
    decode_workbook,
    encode_workbook,
    to_xlsx_bytes,
    write_csv,
    write_workbook,
)

__all__ = [
    "decode_workbook",
    "encode_workbook",
    "to_xlsx_bytes",
    "write_csv",
    "write_workbook",
]
