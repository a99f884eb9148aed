"""Configuration loading utilities.

Supports YAML and JSON files, either dedicated to the engine or shared with
an application that keeps the engine settings under a ``dockengine`` key.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from dockengine.core.schemas import EngineConfig

SECTION = "dockengine"


def load_config(path: Path | str) -> EngineConfig:
    """Load and validate an engine configuration file.

    Args:
        path: Path to YAML or JSON configuration file. If its top level has a
            'dockengine' key, only that section is read

    Returns:
        Validated EngineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or the content is not a mapping
        pydantic.ValidationError: If config is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")
    if SECTION in data:
        data = data[SECTION] or {}

    return EngineConfig.model_validate(data)
