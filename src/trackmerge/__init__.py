"""
Trackmerge: time-aligned merging of monitoring instrument exports.

This package parses sensor-export spreadsheets (AMTS total stations,
prism tracks, seismographs), aligns their readings to hourly time keys
and combines them into one table with paired prism differences.
"""

from importlib.metadata import version

__version__ = version("trackmerge")

__all__ = ["__version__"]
