"""Tests for combining aligned tables."""

import pandas as pd
import pytest

from trackmerge.alignment.aligner import align
from trackmerge.core.table import Table
from trackmerge.errors import CombineError
from trackmerge.merge.combiner import MergedTable, combine, sort_keys
from trackmerge.merge.differences import DiffSpec, PairingMode


class TestCombine:
    """Tests for combine()."""

    def test_two_tracks_share_one_hour(self, table_a: Table, table_b: Table) -> None:
        merged = combine([align(table_a), align(table_b)])
        assert merged.header == ("Time", "X", "Y")
        assert merged.rows == (("2025-01-01T08:15:00", 5, 7),)
        assert merged.keys == ("01/01/2025 08:00",)

    def test_key_time_display(self, table_a: Table, table_b: Table) -> None:
        merged = combine([align(table_a), align(table_b)], time_display="key")
        assert merged.rows[0][0] == "01/01/2025 08:00"

    def test_raw_time_from_first_table_with_key(self, prism_a: Table, prism_b: Table) -> None:
        merged = combine([align(prism_b), align(prism_a)])
        times = dict(zip(merged.keys, (row[0] for row in merged.rows), strict=True))
        assert times["03/01/2025 08:00"] == "2025-03-01T08:20:00"
        assert times["03/01/2025 10:00"] == "2025-03-01T10:00:00"

    def test_union_of_keys_with_null_fill(self, prism_a: Table, prism_b: Table) -> None:
        aligned_a, aligned_b = align(prism_a), align(prism_b)
        merged = combine([aligned_a, aligned_b])

        assert set(merged.keys) == set(aligned_a.keys) | set(aligned_b.keys)
        assert merged.rows[-1] == ("2025-03-01T10:00:00", 2.0, 0.25, None, None)

    def test_table_blocks_in_declared_order(self, prism_a: Table, prism_b: Table) -> None:
        merged = combine([align(prism_a), align(prism_b)])
        assert merged.header == (
            "Time",
            "LBN-TP-TK2-01A - Easting",
            "LBN-TP-TK2-01A - Northing",
            "LBN-TP-TK2-01B - Easting",
            "LBN-TP-TK2-01B - Northing",
        )

    def test_differences_appended(self, prism_a: Table, prism_b: Table) -> None:
        merged = combine(
            [align(prism_a), align(prism_b)], DiffSpec(mode=PairingMode.PATTERN)
        )
        assert merged.header[-2:] == ("Easting Difference", "Northing Difference")
        assert merged.difference_count == 2

        by_key = dict(zip(merged.keys, merged.rows, strict=True))
        assert by_key["03/01/2025 08:00"][-2:] == (0.25, 0.25)
        # 09:00 has no 01A northing, 10:00 has no B readings
        assert by_key["03/01/2025 09:00"][-2:] == (0.5, "")
        assert by_key["03/01/2025 10:00"][-2:] == ("", "")

    def test_column_width_invariant(self, prism_a: Table, prism_b: Table) -> None:
        tables = [align(prism_a), align(prism_b)]
        merged = combine(tables, DiffSpec(mode=PairingMode.ADJACENT))
        expected = 1 + sum(t.width - 1 for t in tables) + merged.difference_count
        assert merged.column_count == expected
        assert all(len(row) == expected for row in merged.rows)

    def test_numeric_text_is_coerced(self) -> None:
        table = Table.from_rows(
            [["Time", "X", "Note"], ["2025-01-01T08:00:00", "12.5", "ok"]]
        )
        merged = combine([align(table)])
        assert merged.rows[0] == ("2025-01-01T08:00:00", 12.5, "ok")

    def test_numeric_time_stays_text(self) -> None:
        table = Table.from_rows([["Time", "X"], [1735718400000, 1]])
        merged = combine([align(table)])
        assert merged.rows[0][0] == "1735718400000"

    def test_table_without_keys_contributes_nulls(self, table_a: Table) -> None:
        empty = Table.from_rows([["Time", "Z"], ["n/a", 1]])
        merged = combine([align(table_a), align(empty)])
        assert merged.header == ("Time", "X", "Z")
        assert merged.rows == (("2025-01-01T08:15:00", 5, None),)

    def test_no_tables(self) -> None:
        with pytest.raises(CombineError):
            combine([])


class TestSortKeys:
    """Tests for key ordering."""

    def test_lexicographic_is_default(self) -> None:
        keys = {"12/31/2024 23:00", "01/01/2025 00:00", "06/15/2024 12:00"}
        assert sort_keys(keys) == [
            "01/01/2025 00:00",
            "06/15/2024 12:00",
            "12/31/2024 23:00",
        ]

    def test_chronological(self) -> None:
        keys = {"12/31/2024 23:00", "01/01/2025 00:00", "06/15/2024 12:00"}
        assert sort_keys(keys, "chronological") == [
            "06/15/2024 12:00",
            "12/31/2024 23:00",
            "01/01/2025 00:00",
        ]


class TestMergedTable:
    """Tests for MergedTable accessors."""

    @pytest.fixture
    def merged(self) -> MergedTable:
        return MergedTable(
            header=("Time", "X", "X", "Difference"),
            rows=(("t1", 1, 2, -1), ("t2", None, 3, "")),
            keys=("k1", "k2"),
            difference_count=1,
        )

    def test_as_rows(self, merged: MergedTable) -> None:
        assert merged.as_rows()[0] == ["Time", "X", "X", "Difference"]
        assert len(merged.as_rows()) == 3

    def test_column(self, merged: MergedTable) -> None:
        assert merged.column("X") == [1, None]
        with pytest.raises(KeyError):
            merged.column("missing")

    def test_to_frame(self, merged: MergedTable) -> None:
        df = merged.to_frame()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["Time", "X", "X.1", "Difference"]
        assert df["X.1"].tolist() == [2, 3]
