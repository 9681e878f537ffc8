"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from trackmerge.cli import app

runner = CliRunner()


@pytest.fixture
def job_config(tmp_path: Path, track_files: dict[str, Path]) -> Path:
    """Merge job over the track fixtures, writing under tmp_path/out."""
    path = tmp_path / "job.yaml"
    path.write_text(
        "project: tk2\n"
        "inputs:\n"
        "  - name: TK-2A\n"
        "    path: TK2A.csv\n"
        "  - name: TK-2B\n"
        "    path: TK2B.csv\n"
        "  - name: Drill Time\n"
        "    path: drill.csv\n"
        "    required: false\n"
        "    role: ancillary\n"
        "differences:\n"
        "  enabled: true\n"
        "output:\n"
        f"  root: {tmp_path / 'out'}\n",
        encoding="utf-8",
    )
    return path


class TestInspect:
    """Tests for the inspect command."""

    def test_reports_shape(self, track_files: dict[str, Path]) -> None:
        result = runner.invoke(app, ["inspect", str(track_files["A"])])

        assert result.exit_code == 0
        assert "Time keys" in result.output
        assert "P-01A - Easting" in result.output

    def test_unsupported_file(self, tmp_path: Path) -> None:
        path = tmp_path / "track.json"
        path.write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["inspect", str(path)])
        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["inspect", str(tmp_path / "absent.csv")])
        assert result.exit_code != 0


class TestMerge:
    """Tests for the merge command."""

    def test_merge_writes_workbook(self, job_config: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["merge", "--config", str(job_config)])

        assert result.exit_code == 0, result.output
        assert "Merge Results" in result.output
        assert (tmp_path / "out" / "tk2" / "merged.xlsx").exists()

    def test_dry_run(self, job_config: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["merge", "-c", str(job_config), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Skipped rows" in result.output
        assert not (tmp_path / "out").exists()

    def test_invalid_config(self, tmp_path: Path) -> None:
        path = tmp_path / "job.yaml"
        path.write_text("inputs:\n  - name: A\n", encoding="utf-8")

        result = runner.invoke(app, ["merge", "-c", str(path)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_broken_required_workbook(self, tmp_path: Path, broken_workbook: bytes) -> None:
        (tmp_path / "TK2A.xlsx").write_bytes(broken_workbook)
        path = tmp_path / "job.yaml"
        path.write_text(
            "project: tk2\ninputs:\n  - name: TK-2A\n    path: TK2A.xlsx\n", encoding="utf-8"
        )

        result = runner.invoke(app, ["merge", "-c", str(path)])
        assert result.exit_code == 1
        assert "Merge failed" in result.output

    def test_missing_required_input(self, tmp_path: Path) -> None:
        path = tmp_path / "job.yaml"
        path.write_text("project: tk2\ninputs:\n  - name: TK-2A\n", encoding="utf-8")

        result = runner.invoke(app, ["merge", "-c", str(path)])
        assert result.exit_code == 1
        assert "Merge failed" in result.output


class TestSummary:
    """Tests for the summary command."""

    def test_summary_of_merged_workbook(self, job_config: Path, tmp_path: Path) -> None:
        runner.invoke(app, ["merge", "-c", str(job_config)])
        workbook = tmp_path / "out" / "tk2" / "merged.xlsx"

        result = runner.invoke(
            app, ["summary", str(workbook), "--columns", "Difference", "--lt", "0"]
        )
        assert result.exit_code == 0, result.output

    def test_no_matching_columns(self, track_files: dict[str, Path]) -> None:
        result = runner.invoke(app, ["summary", str(track_files["A"]), "--columns", "Nope"])
        assert result.exit_code == 1

    def test_invalid_column_pattern(self, track_files: dict[str, Path]) -> None:
        result = runner.invoke(app, ["summary", str(track_files["A"]), "--columns", "("])

        assert result.exit_code == 1
        assert "Invalid column pattern" in result.output
