"""
Core value types shared by every pipeline stage.

Cells are plain Python scalars; tables are immutable row sequences.
"""

from trackmerge.core.cells import Cell, is_blank, is_zero, to_number
from trackmerge.core.table import Row, Table

__all__ = ["Cell", "Row", "Table", "is_blank", "is_zero", "to_number"]
