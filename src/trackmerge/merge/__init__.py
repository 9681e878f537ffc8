"""
Merging of aligned tables.

Combines hourly-aligned sources into a single table and orchestrates
the parse, align, combine pipeline.
"""

from trackmerge.merge.combiner import MergedTable, combine
from trackmerge.merge.differences import DifferencePair, DiffSpec, PairingMode
from trackmerge.merge.pipeline import InputSlot, MergePipeline, MergeResult, run_merge

__all__ = [
    "DiffSpec",
    "DifferencePair",
    "InputSlot",
    "MergePipeline",
    "MergeResult",
    "MergedTable",
    "PairingMode",
    "combine",
    "run_merge",
]
