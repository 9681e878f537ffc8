"""
Merge pipeline orchestration.

Reads every input slot in parallel, then aligns and combines the track
inputs in one synchronous pass. The returned MergeResult is the only
state shared between stages.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from trackmerge.alignment.aligner import SkippedRow, align
from trackmerge.core.table import Table
from trackmerge.errors import MissingRequiredInputError, OptionalInputFailure, ParseError
from trackmerge.ingestion.parser import RawFile, parse
from trackmerge.merge.combiner import KeyOrder, MergedTable, TimeDisplay, combine
from trackmerge.merge.differences import DifferencePair, DiffSpec
from trackmerge.utils.logging import get_logger, log_context

if TYPE_CHECKING:
    from trackmerge.config.settings import MergeConfig

log = get_logger(__name__)

SlotRole = Literal["track", "ancillary"]


@dataclass(frozen=True)
class InputSlot:
    """
    A labeled input of the merge.

    Attributes:
        name: Slot label, e.g. "TK-2A" or "Train Time".
        source: File path or in-memory RawFile; None when not selected.
        required: Whether a missing or unreadable file aborts the merge.
        role: ``track`` slots are merged, ``ancillary`` slots are carried along.
    """

    name: str
    source: Path | RawFile | None
    required: bool = True
    role: SlotRole = "track"


@dataclass
class MergeResult:
    """
    Outcome of one merge run.

    Attributes:
        merged: The combined table.
        sources: Names of the track slots merged, in column order.
        ancillary: Parsed ancillary tables by slot name.
        skipped: Rows dropped during alignment, across all tracks.
        failures: Optional inputs that could not be read.
    """

    merged: MergedTable
    sources: list[str]
    ancillary: dict[str, Table] = field(default_factory=dict)
    skipped: list[SkippedRow] = field(default_factory=list)
    failures: list[OptionalInputFailure] = field(default_factory=list)

    def sheets(self) -> dict[str, list[list]]:
        """Merged and ancillary tables as named sheets for export."""
        sheets: dict[str, list[list]] = {"Merged": self.merged.as_rows()}
        for name, table in self.ancillary.items():
            sheets[name] = [list(row) for row in table.rows]
        return sheets


def _read_slot(slot: InputSlot) -> Table:
    with log_context(slot=slot.name):
        source = slot.source
        raw = source if isinstance(source, RawFile) else RawFile.from_path(source)
        table = parse(raw)
        return Table(rows=table.rows, source=slot.name)


class MergePipeline:
    """
    Parse, align and combine a set of input slots.

    Reads are independent and run on a thread pool; alignment starts
    only after every read has finished.
    """

    def __init__(
        self,
        slots: Sequence[InputSlot],
        diff_spec: DiffSpec | None = None,
        *,
        time_display: TimeDisplay = "raw",
        key_order: KeyOrder = "lexicographic",
        max_workers: int = 4,
    ) -> None:
        """
        Initialize merge pipeline.

        Args:
            slots: Input slots; track slots are merged in this order.
            diff_spec: Optional difference column configuration.
            time_display: How the time column is rendered.
            key_order: Sort order of the time keys.
            max_workers: Maximum number of parallel file reads.
        """
        self.slots = list(slots)
        self.diff_spec = diff_spec
        self.time_display = time_display
        self.key_order = key_order
        self.max_workers = max_workers

    def _check_required(self) -> None:
        missing = [s.name for s in self.slots if s.required and s.source is None]
        if missing:
            raise MissingRequiredInputError(missing)

    def _read_all(self) -> tuple[dict[str, Table], list[OptionalInputFailure]]:
        """
        Read all selected slots in parallel.

        Returns:
            Tuple of (tables by slot name, optional failures).

        Raises:
            ParseError: If a required slot cannot be read.
        """
        selected = [s for s in self.slots if s.source is not None]
        tables: dict[str, Table] = {}
        failures: list[OptionalInputFailure] = []
        fatal: ParseError | None = None

        log.info("Reading inputs", files=len(selected), workers=self.max_workers)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(_read_slot, slot): slot for slot in selected}

            for future in as_completed(futures):
                slot = futures[future]
                try:
                    tables[slot.name] = future.result()
                except ParseError as e:
                    if slot.required:
                        log.error("Failed to read required input", slot=slot.name, error=str(e))
                        fatal = fatal or e
                    else:
                        log.warning(
                            "Optional input unreadable, continuing without it",
                            slot=slot.name,
                            error=str(e),
                        )
                        failures.append(OptionalInputFailure(slot=slot.name, message=str(e)))

        if fatal is not None:
            raise fatal

        # as_completed order is arbitrary; report in declared order
        order = {s.name: i for i, s in enumerate(self.slots)}
        failures.sort(key=lambda f: order[f.slot])
        return tables, failures

    def run(self) -> MergeResult:
        """
        Run the full merge.

        Returns:
            MergeResult with the merged table and diagnostics.

        Raises:
            MissingRequiredInputError: Before any I/O, if required slots are empty.
            ParseError: If a required input cannot be parsed.
            CombineError: If no track input is available.
        """
        self._check_required()
        tables, failures = self._read_all()

        tracks = [s for s in self.slots if s.role == "track" and s.name in tables]
        aligned = [align(tables[s.name], source=s.name) for s in tracks]

        merged = combine(
            aligned,
            self.diff_spec,
            time_display=self.time_display,
            key_order=self.key_order,
        )

        ancillary = {
            s.name: tables[s.name]
            for s in self.slots
            if s.role == "ancillary" and s.name in tables
        }
        skipped = [row for table in aligned for row in table.skipped]

        log.info(
            "Merge complete",
            sources=[s.name for s in tracks],
            keys=merged.key_count,
            columns=merged.column_count,
            skipped=len(skipped),
            optional_failures=len(failures),
        )

        return MergeResult(
            merged=merged,
            sources=[s.name for s in tracks],
            ancillary=ancillary,
            skipped=skipped,
            failures=failures,
        )


def diff_spec_from_config(config: "MergeConfig") -> DiffSpec | None:
    """Build the DiffSpec described by a config, or None if disabled."""
    differences = config.differences
    if not differences.enabled:
        return None
    return DiffSpec(
        mode=differences.mode,
        pairs=tuple(
            DifferencePair(left=p.left, right=p.right, label=p.label)
            for p in differences.pairs
        ),
        pattern=differences.pattern,
        prefix_base_name=differences.prefix_base_name,
    )


def build_pipeline(config: "MergeConfig") -> MergePipeline:
    """Create a MergePipeline from a MergeConfig."""
    slots = [
        InputSlot(
            name=slot.name,
            source=config.resolve_input(slot),
            required=slot.required,
            role=slot.role.value,
        )
        for slot in config.inputs
    ]
    return MergePipeline(
        slots,
        diff_spec_from_config(config),
        time_display=config.time_display,
        key_order=config.key_order,
        max_workers=config.max_workers,
    )


def run_merge(config: "MergeConfig", *, write: bool = True) -> MergeResult:
    """
    Convenience function to run a configured merge and write its outputs.

    Nothing is written when the merge fails.

    Args:
        config: Merge configuration.
        write: Whether to write the workbook (and CSV) outputs.

    Returns:
        MergeResult of the run.
    """
    from trackmerge.export.workbook import write_csv, write_workbook

    result = build_pipeline(config).run()

    if write:
        write_workbook(config.workbook_path, result.sheets())
        if config.output.write_csv:
            write_csv(config.csv_path, result.merged.as_rows())

    return result
