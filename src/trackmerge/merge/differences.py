"""
Derived difference columns between paired prism readings.

Pairs are resolved against the merged header, either from explicit
positions, from adjacent columns, or by matching A/B prism names.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from trackmerge.core.cells import Cell, to_number

# Matches e.g. "LBN-TP-TK2-01A - Easting": station, side letter, rest
DEFAULT_PAIR_PATTERN = r"^(?P<station>.*?\d+)(?P<side>[AB])(?P<rest>\s*-.*)?$"

MEASUREMENT_LABELS: tuple[tuple[str, str], ...] = (
    ("easting", "Easting Difference"),
    ("northing", "Northing Difference"),
    ("height", "Height Difference"),
)
DEFAULT_LABEL = "Difference"


class PairingMode(str, Enum):
    """How difference pairs are found."""

    EXPLICIT = "explicit"
    ADJACENT = "adjacent"
    PATTERN = "pattern"


@dataclass(frozen=True)
class DifferencePair:
    """
    Two merged-row positions whose difference becomes a column.

    Attributes:
        left: Position of the minuend (0 is the time column).
        right: Position of the subtrahend.
        label: Header for the derived column; derived from the
            operand headers when not given.
    """

    left: int
    right: int
    label: str | None = None


def difference_label(left: str, right: str, *, prefix_base_name: bool = False) -> str:
    """
    Label for the difference of two columns.

    The measurement kind is detected from either header; with
    ``prefix_base_name`` the prism base names (text before " - ")
    are prepended.

    Args:
        left: Header of the left operand.
        right: Header of the right operand.
        prefix_base_name: Whether to prefix the prism base name.

    Returns:
        Column label such as ``"Easting Difference"``.
    """
    lowered = (left.lower(), right.lower())
    kind = DEFAULT_LABEL
    for needle, label in MEASUREMENT_LABELS:
        if any(needle in h for h in lowered):
            kind = label
            break

    if not prefix_base_name:
        return kind

    base_left = left.split(" - ")[0]
    base_right = right.split(" - ")[0]
    base = base_left if base_left == base_right else f"{base_left},{base_right}"
    return f"{base} - {kind}"


def difference_value(left: Cell, right: Cell) -> int | float | str:
    """
    Difference of two cells, or ``""`` unless both are finite numbers.

    The empty string marks a failed difference and is kept distinct
    from the None used for missing source cells.
    """
    a = to_number(left)
    b = to_number(right)
    if a is None or b is None:
        return ""
    return a - b


@dataclass(frozen=True)
class ResolvedPair:
    """A difference pair with its final label."""

    left: int
    right: int
    label: str


@dataclass(frozen=True)
class DiffSpec:
    """
    Declarative difference configuration.

    Attributes:
        mode: Pairing mode.
        pairs: Explicit pairs (``explicit`` mode).
        pattern: Regex with ``side`` group (``pattern`` mode).
        prefix_base_name: Prefix labels with the prism base name.
    """

    mode: PairingMode = PairingMode.PATTERN
    pairs: tuple[DifferencePair, ...] = field(default_factory=tuple)
    pattern: str = DEFAULT_PAIR_PATTERN
    prefix_base_name: bool = False

    def resolve(self, header: Sequence[str]) -> list[ResolvedPair]:
        """
        Resolve the pairs against a merged header.

        Args:
            header: Merged header, ``header[0]`` being the time column.

        Returns:
            Resolved pairs in output order.

        Raises:
            ValueError: If an explicit pair points outside the header.
        """
        if self.mode == PairingMode.EXPLICIT:
            positions = [(p.left, p.right, p.label) for p in self.pairs]
        elif self.mode == PairingMode.ADJACENT:
            positions = [(j, j + 1, None) for j in range(1, len(header) - 1, 2)]
        else:
            positions = [(i, j, None) for i, j in _match_sides(header, self.pattern)]

        resolved = []
        for left, right, label in positions:
            for position in (left, right):
                if not 1 <= position < len(header):
                    msg = (
                        f"Difference column {position} is outside the merged "
                        f"header (1..{len(header) - 1})"
                    )
                    raise ValueError(msg)
            resolved.append(
                ResolvedPair(
                    left=left,
                    right=right,
                    label=label
                    or difference_label(
                        header[left],
                        header[right],
                        prefix_base_name=self.prefix_base_name,
                    ),
                )
            )
        return resolved


def _match_sides(header: Sequence[str], pattern: str) -> list[tuple[int, int]]:
    """Pair A-side columns with the B-side column of the same name."""
    regex = re.compile(pattern)
    a_side: dict[tuple[str, ...], int] = {}
    b_side: dict[tuple[str, ...], int] = {}

    for position, name in enumerate(header):
        if position == 0:
            continue
        match = regex.match(name)
        if match is None:
            continue
        side = match.group("side").upper()
        identity = tuple(
            value or "" for key, value in match.groupdict().items() if key != "side"
        )
        target = a_side if side == "A" else b_side if side == "B" else None
        if target is not None:
            target.setdefault(identity, position)

    return [
        (position, b_side[identity])
        for identity, position in a_side.items()
        if identity in b_side
    ]
