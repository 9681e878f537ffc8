"""Pytest configuration and shared fixtures."""

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook

from trackmerge.core.table import Table


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def table_a() -> Table:
    """Track A with two readings in the 08:00 hour, the second a zero placeholder."""
    return Table.from_rows(
        [
            ["Time", "X"],
            ["2025-01-01T08:15:00", 5],
            ["2025-01-01T08:45:00", 0],
        ],
        source="A",
    )


@pytest.fixture
def table_b() -> Table:
    """Track B with one reading in the 08:00 hour."""
    return Table.from_rows(
        [
            ["Time", "Y"],
            ["2025-01-01T08:30:00", 7],
        ],
        source="B",
    )


@pytest.fixture
def prism_a() -> Table:
    """Prism 01A easting/northing readings over three hours."""
    return Table.from_rows(
        [
            ["Time", "LBN-TP-TK2-01A - Easting", "LBN-TP-TK2-01A - Northing"],
            ["2025-03-01T08:05:00", 0, 0],
            ["2025-03-01T08:35:00", 1.25, -0.5],
            ["2025-03-01T09:10:00", 1.5, None],
            ["not a time", 99, 99],
            ["2025-03-01T10:00:00", 2.0, 0.25],
        ],
        source="TK-2A",
    )


@pytest.fixture
def prism_b() -> Table:
    """Prism 01B easting/northing readings, missing the 10:00 hour."""
    return Table.from_rows(
        [
            ["Time", "LBN-TP-TK2-01B - Easting", "LBN-TP-TK2-01B - Northing"],
            ["2025-03-01T08:20:00", 1.0, -0.75],
            ["2025-03-01T09:40:00", 1.0, 0.5],
        ],
        source="TK-2B",
    )


@pytest.fixture
def write_csv_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing CSV text into the temporary directory."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def track_files(write_csv_file: Callable[[str, str], Path]) -> dict[str, Path]:
    """CSV exports for tracks A and B plus a drill time log."""
    return {
        "A": write_csv_file(
            "TK2A.csv",
            "Time,P-01A - Easting,P-01A - Height\n"
            "2025-03-01 08:05:00,0,0\n"
            "2025-03-01 08:35:00,1.5,0.25\n"
            "2025-03-01 09:10:00,2,0.5\n"
            "bad time,3,3\n",
        ),
        "B": write_csv_file(
            "TK2B.csv",
            "Time,P-01B - Easting,P-01B - Height\n"
            "2025-03-01 08:50:00,1,0.75\n"
            "2025-03-01 10:00:00,4,\n",
        ),
        "drill": write_csv_file(
            "drill.csv",
            "Start,End\n2025-03-01 08:00:00,2025-03-01 08:30:00\n",
        ),
    }


@pytest.fixture
def broken_workbook() -> bytes:
    """A valid xlsx package whose first worksheet XML is truncated."""
    workbook = Workbook()
    workbook.active.append(["Start", "End"])
    buffer = io.BytesIO()
    workbook.save(buffer)

    source = zipfile.ZipFile(io.BytesIO(buffer.getvalue()))
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w") as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                data = b"<worksheet><sheetData><row><c"
            target.writestr(item, data)
    return output.getvalue()
