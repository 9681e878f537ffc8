"""
Union of aligned tables on their time keys.

Output columns are laid out table by table in declared order, followed
by any derived difference columns. Absent keys are filled with nulls so
every row has the same width.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

import pandas as pd

from trackmerge.alignment.aligner import AlignedTable
from trackmerge.alignment.timekey import parse_time_key
from trackmerge.core.cells import Cell, coerce_numeric_text
from trackmerge.core.table import Row
from trackmerge.errors import CombineError
from trackmerge.merge.differences import DiffSpec, difference_value
from trackmerge.utils.logging import get_logger

log = get_logger(__name__)

TIME_COLUMN = "Time"

TimeDisplay = Literal["raw", "key"]
KeyOrder = Literal["lexicographic", "chronological"]


@dataclass(frozen=True)
class MergedTable:
    """
    Combined output handed to renderers and exporters.

    Attributes:
        header: ``Time``, each table's non-time columns, difference labels.
        rows: One row per time key, in key order.
        keys: The time key of each row.
        difference_count: Number of trailing difference columns.
    """

    header: tuple[str, ...]
    rows: tuple[Row, ...]
    keys: tuple[str, ...]
    difference_count: int = 0

    @property
    def column_count(self) -> int:
        """Width of every row."""
        return len(self.header)

    @property
    def key_count(self) -> int:
        """Number of distinct time keys."""
        return len(self.keys)

    def as_rows(self) -> list[list[Cell]]:
        """Header followed by data rows, as plain lists."""
        return [list(self.header), *(list(row) for row in self.rows)]

    def column(self, name: str) -> list[Cell]:
        """
        Values of the first column with the given header.

        Raises:
            KeyError: If no column has that header.
        """
        try:
            index = self.header.index(name)
        except ValueError as e:
            raise KeyError(name) from e
        return [row[index] for row in self.rows]

    def to_frame(self, *, validate: bool = True) -> pd.DataFrame:
        """
        Convert to a DataFrame for charting and statistics.

        Duplicate header names are de-duplicated with a ``.n`` suffix.

        Args:
            validate: Whether to validate against MergedTableSchema.

        Returns:
            DataFrame with object-typed columns.
        """
        from trackmerge.schemas.merged import MergedTableSchema

        columns = _unique_names(self.header)
        df = pd.DataFrame(list(self.rows), columns=columns, dtype=object)
        if validate:
            df = MergedTableSchema.validate(df)
        return df


def _unique_names(names: Sequence[str]) -> list[str]:
    seen: dict[str, int] = {}
    unique = []
    for name in names:
        count = seen.get(name, 0)
        unique.append(name if count == 0 else f"{name}.{count}")
        seen[name] = count + 1
    return unique


def sort_keys(keys: set[str], order: KeyOrder = "lexicographic") -> list[str]:
    """
    Sort time keys.

    Lexicographic order on ``MM/DD/YYYY HH:00`` is only chronological
    within one year; it is the default because existing charts rely on it.

    Args:
        keys: Distinct time keys.
        order: ``lexicographic`` or ``chronological``.

    Returns:
        Sorted keys.
    """
    if order == "chronological":
        return sorted(keys, key=parse_time_key)
    return sorted(keys)


def _time_cell(key: str, tables: Sequence[AlignedTable], display: TimeDisplay) -> str:
    if display == "key":
        return key
    for table in tables:
        row = table.rows.get(key)
        if row is not None and row[0] is not None:
            return str(row[0])
    return key


def combine(
    tables: Sequence[AlignedTable],
    diff_spec: DiffSpec | None = None,
    *,
    time_display: TimeDisplay = "raw",
    key_order: KeyOrder = "lexicographic",
) -> MergedTable:
    """
    Combine aligned tables into one merged table.

    Args:
        tables: Aligned tables in declared column order.
        diff_spec: Optional difference configuration.
        time_display: ``raw`` writes the first source timestamp of the
            hour, ``key`` writes the hourly key itself.
        key_order: Sort order of the time keys.

    Returns:
        MergedTable with one row per key across all tables.

    Raises:
        CombineError: If no tables are given.
    """
    if not tables:
        msg = "At least one aligned table is required to combine"
        raise CombineError(msg)

    all_keys: set[str] = set()
    for table in tables:
        all_keys.update(table.rows)
    keys = sort_keys(all_keys, key_order)

    header: list[str] = [TIME_COLUMN]
    for table in tables:
        header.extend(table.header[1:])

    pairs = diff_spec.resolve(header) if diff_spec is not None else []

    rows: list[Row] = []
    for key in keys:
        row: list[Cell] = [_time_cell(key, tables, time_display)]
        for table in tables:
            source_row = table.rows.get(key)
            if source_row is None:
                row.extend([None] * (table.width - 1))
            else:
                row.extend(coerce_numeric_text(value) for value in source_row[1:])
        row.extend(difference_value(row[p.left], row[p.right]) for p in pairs)
        rows.append(tuple(row))

    header.extend(p.label for p in pairs)

    log.info(
        "Combined tables",
        tables=len(tables),
        keys=len(keys),
        columns=len(header),
        differences=len(pairs),
    )

    return MergedTable(
        header=tuple(header),
        rows=tuple(rows),
        keys=tuple(keys),
        difference_count=len(pairs),
    )
