"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance
from a ``base.yaml`` next to the job file.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from trackmerge.config.settings import MergeConfig


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> MergeConfig:
    """
    Load merge configuration from YAML file(s).

    Minimal config requires only:
        - project: str
        - inputs: list of {name, path}

    A relative ``data_root`` is resolved against the config file's
    directory so jobs can be run from anywhere.

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated MergeConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        is_self = potential_base.resolve() == config_path.resolve()
        base_data = (
            load_yaml(potential_base) if potential_base.exists() and not is_self else {}
        )

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    if not merged.get("project"):
        msg = "Config must specify 'project' name"
        raise ValueError(msg)

    if not merged.get("inputs"):
        msg = "Config must specify at least one entry in 'inputs'"
        raise ValueError(msg)

    data_root = Path(merged.get("data_root", "."))
    if not data_root.is_absolute():
        data_root = config_path.parent / data_root
    merged["data_root"] = data_root

    return MergeConfig.model_validate(merged)
