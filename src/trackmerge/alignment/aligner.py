"""
Hour-bucket alignment with a deterministic representative per bucket.

Instrument exports often hold several readings per hour of which most
are zero placeholders. The representative row takes, per column, the
first real reading in row order.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from trackmerge.alignment.timekey import time_key
from trackmerge.core.cells import Cell, is_zero
from trackmerge.core.table import Row, Table
from trackmerge.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class SkippedRow:
    """
    A data row dropped from alignment because its time cell is not a date.

    Attributes:
        source: Table the row came from.
        row_number: 1-based position of the row in the file (header is 1).
        value: The offending time cell.
        reason: Human-readable explanation.
    """

    source: str
    row_number: int
    value: Cell
    reason: str = "time cell is not a valid date"


@dataclass
class AlignedTable:
    """
    One source table reduced to a representative row per time key.

    Attributes:
        source: Name of the source table.
        header: Column names padded to ``width``.
        rows: Time key to representative row, in first-seen order.
        skipped: Rows that contributed no key.
    """

    source: str
    header: list[str]
    rows: dict[str, Row] = field(default_factory=dict)
    skipped: list[SkippedRow] = field(default_factory=list)

    @property
    def width(self) -> int:
        """Number of columns including the time column."""
        return len(self.header)

    @property
    def keys(self) -> list[str]:
        """Time keys in first-seen order."""
        return list(self.rows)


def _is_reading(value: Cell) -> bool:
    return value is not None and value != "" and not is_zero(value)


def pick_representative(rows: Sequence[Row], width: int) -> Row:
    """
    Pick one value per column from a group of rows.

    Column 0 is the first row's raw time. Every other column takes the
    first value that is not null, empty or zero; failing that, the
    first value present at all (which may itself be null or zero).

    Args:
        rows: Rows sharing one time key, in original order.
        width: Number of columns of the representative row.

    Returns:
        The representative row.
    """
    if not rows:
        return (None,) * width

    picked: list[Cell] = [rows[0][0] if rows[0] else None]
    for column in range(1, width):
        present = [row[column] for row in rows if column < len(row)]
        value = next((v for v in present if _is_reading(v)), None)
        if value is None and present:
            value = present[0]
        picked.append(value)
    return tuple(picked)


def group_by_hour(table: Table) -> tuple[dict[str, list[Row]], list[SkippedRow]]:
    """
    Group a table's data rows by the hourly key of column 0.

    Args:
        table: Parsed table; the header row is skipped.

    Returns:
        Tuple of (groups in first-seen key order, skipped rows).
    """
    groups: dict[str, list[Row]] = {}
    skipped: list[SkippedRow] = []

    for index, row in enumerate(table.data_rows):
        value = row[0] if row else None
        key = time_key(value)
        if key is None:
            skipped.append(
                SkippedRow(source=table.source, row_number=index + 2, value=value)
            )
            log.debug(
                "Skipping row without valid time",
                source=table.source,
                row=index + 2,
                value=value,
            )
            continue
        groups.setdefault(key, []).append(row)

    return groups, skipped


def align(table: Table, source: str | None = None) -> AlignedTable:
    """
    Align a table to hourly keys.

    Rows whose time cell does not parse are reported in ``skipped``
    rather than raised; a table without any valid time yields an
    empty alignment.

    Args:
        table: Parsed table with timestamps in column 0.
        source: Optional name overriding ``table.source``.

    Returns:
        AlignedTable with one representative row per key.
    """
    name = source or table.source
    header = table.header_names()
    width = len(header)

    groups, skipped = group_by_hour(table)
    if source is not None:
        skipped = [
            SkippedRow(source=name, row_number=s.row_number, value=s.value, reason=s.reason)
            for s in skipped
        ]

    rows = {key: pick_representative(group, width) for key, group in groups.items()}

    log.info(
        "Aligned table",
        source=name,
        data_rows=len(table),
        keys=len(rows),
        skipped=len(skipped),
    )
    if skipped:
        log.warning("Rows without a valid time were skipped", source=name, count=len(skipped))

    return AlignedTable(source=name, header=header, rows=rows, skipped=skipped)
