"""Tests for hourly time keys."""

from datetime import datetime

import pytest

from trackmerge.alignment.timekey import parse_time_key, time_key


class TestTimeKey:
    """Tests for time_key derivation."""

    @pytest.mark.parametrize(
        ("cell", "expected"),
        [
            ("2025-01-01T08:15:00", "01/01/2025 08:00"),
            ("2025-01-01T08:59:59", "01/01/2025 08:00"),
            ("2025-12-31 23:00:00", "12/31/2025 23:00"),
            ("03/04/2025 07:30", "03/04/2025 07:00"),
        ],
    )
    def test_truncates_to_hour(self, cell: str, expected: str) -> None:
        assert time_key(cell) == expected

    @pytest.mark.parametrize(
        "cell", [None, "", 0, 0.0, "not a date", "Easting", "3B", "1A", "Sep 3"]
    )
    def test_invalid_cells_have_no_key(self, cell: object) -> None:
        assert time_key(cell) is None

    def test_numbers_are_epoch_milliseconds(self) -> None:
        # 2025-01-01 08:00:00 UTC
        assert time_key(1735718400000) == "01/01/2025 08:00"

    def test_timezone_keeps_wall_clock(self) -> None:
        assert time_key("2025-01-01T08:15:00+02:00") == "01/01/2025 08:00"


class TestParseTimeKey:
    """Tests for parsing keys back into datetimes."""

    def test_round_trip(self) -> None:
        assert parse_time_key("01/02/2025 13:00") == datetime(2025, 1, 2, 13, 0)

    def test_rejects_other_formats(self) -> None:
        with pytest.raises(ValueError):
            parse_time_key("2025-01-02 13:00")
