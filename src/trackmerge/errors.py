"""
Error taxonomy for the merge pipeline.

Fatal conditions are raised as exceptions; optional-input failures are
recorded as plain values so a merge can degrade instead of aborting.
"""

from dataclasses import dataclass


class TrackMergeError(Exception):
    """Base class for all merge pipeline errors."""


class ParseError(TrackMergeError):
    """An input could not be decoded into a table."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot parse {source!r}: {reason}")


class MissingRequiredInputError(TrackMergeError):
    """One or more required input slots have no file."""

    def __init__(self, slots: list[str]) -> None:
        self.slots = slots
        super().__init__(f"Missing required input(s): {', '.join(slots)}")


class CombineError(TrackMergeError):
    """The combiner was called without any aligned tables."""


@dataclass(frozen=True)
class OptionalInputFailure:
    """
    Record of an optional input that failed to parse.

    Attributes:
        slot: Name of the input slot.
        message: Description of the underlying error.
    """

    slot: str
    message: str
