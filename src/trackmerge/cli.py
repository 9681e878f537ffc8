"""Command-line interface for the trackmerge pipeline."""

import math
import re
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from trackmerge.errors import TrackMergeError

app = typer.Typer(
    name="trackmerge",
    help="Time-aligned merging of monitoring instrument exports.",
    no_args_is_help=True,
)

console = Console()

MAX_SKIPPED_SHOWN = 10


def _format_average(value: float) -> str:
    return "N/A" if math.isnan(value) else f"{value:.4f}"


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines."),
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    from trackmerge.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


@app.command()
def merge(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to merge job YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Merge without writing any output files."),
    ] = False,
) -> None:
    """Merge the configured track files into one time-aligned workbook."""
    from trackmerge.config.loader import load_config
    from trackmerge.merge.pipeline import run_merge
    from trackmerge.utils.logging import configure_logging

    console.print(f"[blue]Loading configuration from {config}[/blue]")
    try:
        merge_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    configure_logging(
        level=merge_config.logging.level,
        json_output=merge_config.logging.json_output,
    )

    try:
        result = run_merge(merge_config, write=not dry_run)
    except TrackMergeError as e:
        console.print(f"[red]Merge failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Merge Results ({merge_config.project})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Merged sources", ", ".join(result.sources))
    table.add_row("Time keys", str(result.merged.key_count))
    table.add_row("Columns", str(result.merged.column_count))
    table.add_row("Difference columns", str(result.merged.difference_count))
    table.add_row("Skipped rows", str(len(result.skipped)))
    if result.ancillary:
        table.add_row("Ancillary inputs", ", ".join(result.ancillary))
    console.print(table)

    for failure in result.failures:
        console.print(f"[yellow]⚠ Optional input {failure.slot} ignored: {failure.message}[/yellow]")

    if result.skipped:
        console.print(f"\n[yellow]Rows without a valid time ({len(result.skipped)}):[/yellow]")
        for row in result.skipped[:MAX_SKIPPED_SHOWN]:
            console.print(f"  {row.source} row {row.row_number}: {row.value!r}")
        if len(result.skipped) > MAX_SKIPPED_SHOWN:
            console.print(f"  ... and {len(result.skipped) - MAX_SKIPPED_SHOWN} more")

    if not dry_run:
        console.print(f"\n[green]Saved to: {merge_config.workbook_path}[/green]")
        if merge_config.output.write_csv:
            console.print(f"[green]Saved to: {merge_config.csv_path}[/green]")


@app.command()
def inspect(
    file: Annotated[
        Path,
        typer.Argument(help="CSV or xlsx file to inspect.", exists=True, dir_okay=False),
    ],
) -> None:
    """Parse one file and report its shape and hourly coverage."""
    from trackmerge.alignment.aligner import align
    from trackmerge.ingestion.parser import read_file

    try:
        parsed = read_file(file)
    except TrackMergeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    aligned = align(parsed)

    table = Table(title=f"File: {file.name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Columns", str(parsed.width))
    table.add_row("Data rows", str(len(parsed)))
    table.add_row("Time keys", str(len(aligned.rows)))
    table.add_row("Skipped rows", str(len(aligned.skipped)))
    if aligned.keys:
        table.add_row("First key", aligned.keys[0])
        table.add_row("Last key", aligned.keys[-1])
    console.print(table)

    console.print("\n[blue]Columns:[/blue]")
    for index, name in enumerate(aligned.header):
        console.print(f"  {index}: {name}")


@app.command()
def summary(
    file: Annotated[
        Path,
        typer.Argument(help="Merged xlsx workbook.", exists=True, dir_okay=False),
    ],
    columns: Annotated[
        str,
        typer.Option("--columns", help="Regex selecting the columns to summarize."),
    ] = ".",
    less_than: Annotated[
        float | None,
        typer.Option("--lt", help="Count readings below this value."),
    ] = None,
    greater_than: Annotated[
        float | None,
        typer.Option("--gt", help="Count readings above this value."),
    ] = None,
) -> None:
    """Print threshold statistics for columns of a merged workbook."""
    from trackmerge.alignment.aligner import align
    from trackmerge.analysis.summary import select_columns, summarize
    from trackmerge.ingestion.parser import read_file
    from trackmerge.merge.combiner import combine

    try:
        merged = combine([align(read_file(file))], time_display="raw")
    except TrackMergeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    try:
        selected = select_columns(merged.header, columns)
    except re.error as e:
        console.print(f"[red]Invalid column pattern {columns!r}: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not selected:
        console.print(f"[yellow]No columns match {columns!r}[/yellow]")
        raise typer.Exit(code=1)

    stats = summarize(merged, selected, less_than=less_than, greater_than=greater_than)

    table = Table(title=f"Summary: {file.name}")
    table.add_column("Measurement", style="cyan")
    table.add_column("Data Points", justify="right")
    table.add_column(f"< {less_than if less_than is not None else 'N/A'}", justify="right")
    table.add_column("% Less Than", justify="right")
    table.add_column(f"> {greater_than if greater_than is not None else 'N/A'}", justify="right")
    table.add_column("% Greater Than", justify="right")
    table.add_column("Avg +ve", justify="right")
    table.add_column("Avg -ve", justify="right")

    for row in stats.itertuples(index=False):
        table.add_row(
            row.measurement,
            str(row.data_points),
            str(row.less_than_count),
            f"{row.less_than_pct:.2f}",
            str(row.greater_than_count),
            f"{row.greater_than_pct:.2f}",
            _format_average(row.avg_positive),
            _format_average(row.avg_negative),
        )
    console.print(table)


if __name__ == "__main__":
    app()
