"""
Data ingestion layer for reading instrument exports.

All file reading happens through this module so that every table
entering the merge has the same cell normalization.
"""

from trackmerge.ingestion.parser import FileKind, RawFile, parse, read_file

__all__ = ["FileKind", "RawFile", "parse", "read_file"]
