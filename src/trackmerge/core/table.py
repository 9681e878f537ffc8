"""
Rectangular-ish tables of cells.

Row 0 is the header. Sources may produce ragged rows, so every accessor
treats missing trailing cells as None instead of padding on construction.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from trackmerge.core.cells import Cell, is_blank

Row = tuple[Cell, ...]


def synthetic_column_name(index: int) -> str:
    """Name used for a column whose header cell is empty."""
    return f"Col{index}"


@dataclass(frozen=True)
class Table:
    """
    Header row plus data rows, exactly as parsed.

    Attributes:
        rows: All rows including the header at position 0.
        source: Name of the file or slot the table came from.
    """

    rows: tuple[Row, ...]
    source: str = "<memory>"

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]], source: str = "<memory>") -> "Table":
        """Build a table from any nested sequence of cells."""
        return cls(rows=tuple(tuple(row) for row in rows), source=source)

    @property
    def width(self) -> int:
        """Number of columns of the widest row."""
        return max((len(row) for row in self.rows), default=0)

    @property
    def header(self) -> Row:
        """The raw header row (may be shorter than ``width``)."""
        return self.rows[0] if self.rows else ()

    @property
    def data_rows(self) -> tuple[Row, ...]:
        """All rows after the header."""
        return self.rows[1:]

    def __len__(self) -> int:
        return len(self.data_rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.data_rows)

    def header_names(self) -> list[str]:
        """
        Header names padded to the table width.

        Blank header cells get a synthetic ``Col{n}`` name, and
        numeric header cells are rendered as text.

        Returns:
            One name per column.
        """
        names = []
        for index in range(self.width):
            value = self.header[index] if index < len(self.header) else None
            if is_blank(value):
                names.append(synthetic_column_name(index))
            else:
                names.append(str(value))
        return names

    def cell(self, row: int, column: int) -> Cell:
        """Cell at a data-row/column position, None past the row's end."""
        cells = self.data_rows[row]
        return cells[column] if column < len(cells) else None
