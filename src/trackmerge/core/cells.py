"""
Cell values and coercion rules.

A cell is one of None, a number (int or float) or text. Parsers never
produce booleans, so every check here can treat ``bool`` as text-like.
"""

import math
from typing import TypeAlias

Cell: TypeAlias = int | float | str | None


def is_number(cell: Cell) -> bool:
    """Whether the cell holds a numeric value (booleans excluded)."""
    return isinstance(cell, int | float) and not isinstance(cell, bool)


def is_blank(cell: Cell) -> bool:
    """Whether the cell is None or whitespace-only text."""
    return cell is None or (isinstance(cell, str) and not cell.strip())


def is_zero(cell: Cell) -> bool:
    """Whether the cell is numerically zero. Text "0" is not zero."""
    return is_number(cell) and cell == 0


def parse_number(text: str) -> int | float | None:
    """
    Parse text as a finite number.

    Integer literals stay ``int`` so that ``"5"`` becomes ``5``. Digit
    group underscores (``"1_000"``) are not accepted.

    Args:
        text: Text to parse; surrounding whitespace is ignored.

    Returns:
        The number, or None when the text is not a finite number.
    """
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        value = float(stripped)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def to_number(cell: Cell) -> int | float | None:
    """
    Coerce a cell to a finite number.

    Args:
        cell: Cell to coerce.

    Returns:
        The numeric value, or None if the cell is not numeric.
    """
    if is_number(cell):
        return cell if math.isfinite(cell) else None
    if isinstance(cell, str):
        return parse_number(cell)
    return None


def coerce_numeric_text(cell: Cell) -> Cell:
    """Replace numeric text with its number; leave everything else as is."""
    if isinstance(cell, str):
        number = parse_number(cell)
        if number is not None:
            return number
    return cell
