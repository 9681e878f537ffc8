"""
Parsing of CSV and spreadsheet exports into tables.

CSV data cells are normalized to typed values (numbers, ISO timestamps)
while the header row stays text; spreadsheet cells keep the types
stored in the workbook.
"""

import csv
import io
import re
import zipfile
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Literal

import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from trackmerge.core.cells import Cell, is_number, parse_number
from trackmerge.core.table import Table
from trackmerge.errors import ParseError
from trackmerge.utils.logging import get_logger

log = get_logger(__name__)

FileKind = Literal["csv", "xlsx"]

SUFFIX_KINDS: dict[str, FileKind] = {
    ".csv": "csv",
    ".txt": "csv",
    ".xlsx": "xlsx",
    ".xlsm": "xlsx",
}

# Only text with an explicit year is tried as a date: four digits, or a
# two-digit year closing a separated day/month. The timestamp parser
# otherwise reads labels like "1A" or "Sep 3" as dates in year 1.
_YEAR_HINT = re.compile(r"\d{4}|\d{1,2}[/.-]\d{1,2}[/.-]\d{2}(?!\d)")

_WORKBOOK_ERRORS = (
    zipfile.BadZipFile,
    InvalidFileException,
    SyntaxError,  # XML parse errors of both ElementTree and lxml
    KeyError,
    OSError,
    ValueError,
    TypeError,
)


@dataclass(frozen=True)
class RawFile:
    """
    An unparsed input blob.

    Attributes:
        name: File name, used in logs and error messages.
        content: Raw bytes of the file.
        kind: Format discriminator.
    """

    name: str
    content: bytes
    kind: FileKind

    @classmethod
    def from_path(cls, path: Path) -> "RawFile":
        """
        Read a file from disk, inferring its kind from the suffix.

        Raises:
            ParseError: If the suffix is unsupported or the file is unreadable.
        """
        kind = SUFFIX_KINDS.get(path.suffix.lower())
        if kind is None:
            raise ParseError(path.name, f"unsupported file type {path.suffix!r}")
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ParseError(path.name, str(e)) from e
        return cls(name=path.name, content=content, kind=kind)


def parse_timestamp(text: str) -> pd.Timestamp | None:
    """
    Parse text as a calendar date/time.

    Args:
        text: Candidate timestamp text.

    Returns:
        Parsed timestamp, or None if the text is not a date.
    """
    if not _YEAR_HINT.search(text):
        return None
    try:
        parsed = pd.to_datetime(text.strip(), errors="coerce")
    except (ValueError, OverflowError, TypeError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed


def normalize_text_cell(text: str) -> Cell:
    """
    Normalize one CSV field.

    Blank → None, finite number → number, date → ISO-8601 text,
    anything else stays as the original text.
    """
    if not text.strip():
        return None
    number = parse_number(text)
    if number is not None:
        return number
    timestamp = parse_timestamp(text)
    if timestamp is not None:
        return timestamp.isoformat()
    return text


def _normalize_header_cell(text: str) -> Cell:
    return text if text.strip() else None


def _normalize_workbook_cell(value: Any) -> Cell:
    """Normalize one spreadsheet cell value."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if is_number(value):
        return value
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    text = str(value)
    return text if text.strip() else None


def _is_empty_row(row: list[Cell]) -> bool:
    return all(cell is None for cell in row)


def _parse_csv(raw: RawFile) -> list[list[Cell]]:
    try:
        text = raw.content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(raw.name, f"not valid UTF-8 text ({e.reason})") from e

    try:
        records = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as e:
        raise ParseError(raw.name, f"malformed CSV: {e}") from e

    rows = []
    for record in records:
        # The first non-empty row is the header and stays text
        normalize = normalize_text_cell if rows else _normalize_header_cell
        row = [normalize(field) for field in record]
        if row and not _is_empty_row(row):
            rows.append(row)
    return rows


def _parse_xlsx(raw: RawFile) -> list[list[Cell]]:
    try:
        workbook = load_workbook(
            io.BytesIO(raw.content), read_only=True, data_only=True
        )
    except _WORKBOOK_ERRORS as e:
        raise ParseError(raw.name, f"not a readable workbook ({e})") from e

    try:
        if not workbook.worksheets:
            raise ParseError(raw.name, "workbook has no sheets")
        sheet = workbook.worksheets[0]
        rows = []
        # Read-only sheets parse their XML lazily, while rows are iterated
        for values in sheet.iter_rows(values_only=True):
            row = [_normalize_workbook_cell(value) for value in values]
            if row and not _is_empty_row(row):
                rows.append(row)
    except _WORKBOOK_ERRORS as e:
        raise ParseError(raw.name, f"unreadable worksheet ({e})") from e
    finally:
        workbook.close()
    return rows


def parse(raw: RawFile) -> Table:
    """
    Parse a raw file into a table.

    Only the first sheet of a workbook is read. Rows are not padded;
    the table width is that of the widest row.

    Args:
        raw: File content and kind.

    Returns:
        Parsed table with the header at row 0.

    Raises:
        ParseError: If the content cannot be decoded or has no rows.
    """
    if raw.kind == "csv":
        rows = _parse_csv(raw)
    elif raw.kind == "xlsx":
        rows = _parse_xlsx(raw)
    else:
        raise ParseError(raw.name, f"unknown file kind {raw.kind!r}")

    if not rows:
        raise ParseError(raw.name, "file contains no rows")

    table = Table.from_rows(rows, source=raw.name)
    log.info(
        "Parsed file",
        file=raw.name,
        kind=raw.kind,
        rows=len(table),
        width=table.width,
    )
    return table


def read_file(path: Path) -> Table:
    """
    Convenience function to read and parse a file from disk.

    Args:
        path: Path to a CSV or spreadsheet file.

    Returns:
        Parsed table.
    """
    return parse(RawFile.from_path(path))
