"""
Configuration management with typed Pydantic models.

Merge jobs are described in YAML and validated on load.
"""

from trackmerge.config.loader import load_config
from trackmerge.config.settings import (
    DifferenceConfig,
    InputConfig,
    InputRole,
    LoggingConfig,
    MergeConfig,
    OutputConfig,
    PairConfig,
)

__all__ = [
    "DifferenceConfig",
    "InputConfig",
    "InputRole",
    "LoggingConfig",
    "MergeConfig",
    "OutputConfig",
    "PairConfig",
    "load_config",
]
