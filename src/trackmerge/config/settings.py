"""
Typed configuration models using Pydantic.

A merge job is fully described here: which files fill which slots,
how difference columns are paired and where results are written.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from trackmerge.merge.differences import DEFAULT_PAIR_PATTERN, PairingMode


class InputRole(str, Enum):
    """Role of an input slot in the merge."""

    TRACK = "track"  # merged into the output table
    ANCILLARY = "ancillary"  # parsed and carried along (drill/train times)


class InputConfig(BaseModel):
    """One labeled file slot, e.g. "TK-2A" or "Drill Time"."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Slot label")
    path: Path | None = Field(default=None, description="File for this slot")
    required: bool = Field(default=True, description="Abort the merge if missing")
    role: InputRole = Field(default=InputRole.TRACK)


class PairConfig(BaseModel):
    """Explicit difference pair by merged column position."""

    model_config = ConfigDict(frozen=True)

    left: int = Field(ge=1)
    right: int = Field(ge=1)
    label: str | None = None


class DifferenceConfig(BaseModel):
    """Difference column configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False)
    mode: PairingMode = Field(default=PairingMode.PATTERN)
    pattern: str = Field(
        default=DEFAULT_PAIR_PATTERN,
        description="Regex with a 'side' group capturing the A/B prism letter",
    )
    pairs: list[PairConfig] = Field(default_factory=list)
    prefix_base_name: bool = Field(default=False)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Ensure the pattern compiles and has a 'side' group."""
        try:
            compiled = re.compile(v)
        except re.error as e:
            msg = f"Invalid difference pattern {v!r}: {e}"
            raise ValueError(msg) from e
        if "side" not in compiled.groupindex:
            msg = "Difference pattern must define a named group 'side'"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_pairs(self) -> "DifferenceConfig":
        """Explicit mode needs at least one pair."""
        if self.enabled and self.mode == PairingMode.EXPLICIT and not self.pairs:
            msg = "Explicit difference mode requires 'pairs'"
            raise ValueError(msg)
        return self


class OutputConfig(BaseModel):
    """Output paths configuration.

    Structure: {root}/{project}/{filename} (plus a CSV twin if enabled).
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default=Path("./output"))
    filename: str = Field(default="merged.xlsx")
    write_csv: bool = Field(default=False)

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Workbook output must be .xlsx."""
        if not v.lower().endswith(".xlsx"):
            msg = f"Output filename must end with .xlsx, got: {v!r}"
            raise ValueError(msg)
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)


class MergeConfig(BaseModel):
    """Complete merge job configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project identifier (e.g., 'long-bridge-tk2')")
    data_root: Path = Field(default=Path("."))
    inputs: list[InputConfig] = Field(min_length=1)
    differences: DifferenceConfig = Field(default_factory=DifferenceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    time_display: str = Field(default="raw", pattern="^(raw|key)$")
    key_order: str = Field(default="lexicographic", pattern="^(lexicographic|chronological)$")
    max_workers: int = Field(default=4, ge=1, le=32)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("inputs")
    @classmethod
    def validate_unique_names(cls, v: list[InputConfig]) -> list[InputConfig]:
        """Slot names must be unique."""
        names = [slot.name for slot in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Duplicate input names: {duplicates}"
            raise ValueError(msg)
        return v

    def resolve_input(self, slot: InputConfig) -> Path | None:
        """Resolve a slot's path against data_root."""
        if slot.path is None:
            return None
        return slot.path if slot.path.is_absolute() else self.data_root / slot.path

    @property
    def output_dir(self) -> Path:
        """Directory for this project's outputs."""
        return self.output.root / self.project

    @property
    def workbook_path(self) -> Path:
        """Path of the merged workbook."""
        return self.output_dir / self.output.filename

    @property
    def csv_path(self) -> Path:
        """Path of the optional CSV export."""
        return self.workbook_path.with_suffix(".csv")
