"""
Spreadsheet serialization.

Tables are written as plain cell grids (header included as the first
row) so duplicate column names and mixed cell types survive unchanged.
"""

import base64
import binascii
import io
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

import pandas as pd

from trackmerge.core.cells import Cell
from trackmerge.core.table import Table
from trackmerge.errors import ParseError
from trackmerge.ingestion.parser import RawFile, parse
from trackmerge.utils.logging import get_logger

log = get_logger(__name__)

MAX_SHEET_NAME = 31
_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def sheet_name(name: str) -> str:
    """Make a string usable as an Excel sheet name."""
    cleaned = _INVALID_SHEET_CHARS.sub("_", name).strip() or "Sheet"
    return cleaned[:MAX_SHEET_NAME]


def _frame(rows: Sequence[Sequence[Cell]]) -> pd.DataFrame:
    return pd.DataFrame([list(row) for row in rows], dtype=object)


def _write_sheets(target: io.BytesIO | Path, sheets: Mapping[str, Sequence[Sequence[Cell]]]) -> None:
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            _frame(rows).to_excel(
                writer, sheet_name=sheet_name(name), index=False, header=False
            )


def to_xlsx_bytes(rows: Sequence[Sequence[Cell]], sheet: str = "Merged") -> bytes:
    """
    Serialize rows (header first) into an xlsx workbook.

    Args:
        rows: Header row followed by data rows.
        sheet: Sheet name.

    Returns:
        Workbook bytes.
    """
    buffer = io.BytesIO()
    _write_sheets(buffer, {sheet: rows})
    return buffer.getvalue()


def encode_workbook(rows: Sequence[Sequence[Cell]], sheet: str = "Merged") -> str:
    """Serialize rows to an xlsx workbook and base64-encode it."""
    return base64.b64encode(to_xlsx_bytes(rows, sheet)).decode("ascii")


def decode_workbook(payload: str, name: str = "handoff.xlsx") -> Table:
    """
    Decode a base64 workbook back into a table.

    Empty-string cells come back as null.

    Args:
        payload: Base64 text produced by encode_workbook.
        name: Name used in logs and errors.

    Returns:
        Table read from the first sheet.

    Raises:
        ParseError: If the payload is not valid base64 or not a workbook.
    """
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ParseError(name, f"invalid base64 payload ({e})") from e
    return parse(RawFile(name=name, content=content, kind="xlsx"))


def write_workbook(path: Path, sheets: Mapping[str, Sequence[Sequence[Cell]]]) -> Path:
    """
    Write one or more named sheets to an xlsx file.

    Args:
        path: Output path; parent directories are created.
        sheets: Sheet name to rows (header first).

    Returns:
        The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_sheets(path, sheets)
    log.info("Saved workbook", path=str(path), sheets=list(sheets))
    return path


def write_csv(path: Path, rows: Sequence[Sequence[Cell]]) -> Path:
    """
    Write rows (header first) to a CSV file.

    Args:
        path: Output path; parent directories are created.
        rows: Header row followed by data rows.

    Returns:
        The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    _frame(rows).to_csv(path, index=False, header=False)
    log.info("Saved CSV", path=str(path), rows=max(len(rows) - 1, 0))
    return path
