"""
YAML Serialization & Persistence Utilities.

Loads configuration recipes and persists launch manifests. Pydantic models
and Path objects are converted to plain YAML types before writing, and
writes go through a temporary file that replaces the target in one step so
a crash never leaves a half-written manifest behind.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..paths import LOGGER_NAME


def save_as_yaml(data: Any, yaml_path: Path) -> Path:
    """
    Serializes and persists data to a YAML file.

    Args:
        data (Any): Object to save. Supports objects exposing ``model_dump()``
            (Pydantic models), sequences of such objects, or plain dictionaries.
        yaml_path (Path): The destination filesystem path.

    Returns:
        Path: The confirmed path where the YAML was written.

    Raises:
        ValueError: If the data structure cannot be serialized.
        OSError: If a filesystem-level error occurs (permissions, disk full).
    """
    logger = logging.getLogger(LOGGER_NAME)

    try:
        final_data = _sanitize_for_yaml(data)
    except Exception as e:  # model_dump may raise arbitrary errors
        logger.error(f"Serialization failed: object structure is incompatible. Error: {e}")
        raise ValueError(f"Could not serialize object: {e}") from e

    try:
        _persist_yaml_atomic(final_data, yaml_path)
        logger.debug(f"Manifest written → {yaml_path}")
        return yaml_path
    except OSError as e:
        logger.error(f"IO Error: Could not write YAML to {yaml_path}. Error: {e}")
        raise


def load_config_from_yaml(yaml_path: Path) -> dict[str, Any]:
    """
    Loads a raw configuration dictionary from a YAML file.

    Args:
        yaml_path (Path): Path to the source YAML file.

    Returns:
        dict[str, Any]: The loaded mapping (empty for an empty file).

    Raises:
        FileNotFoundError: If the specified path does not exist.
        ValueError: If the document is not a mapping.
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML configuration file not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {yaml_path}, got {type(data).__name__}")
    return data


def _sanitize_for_yaml(obj: Any) -> Any:
    """
    Recursively converts non-serializable types into YAML-standard formats.

    - Pydantic models -> ``model_dump(mode="json")``
    - Path objects -> strings
    - Dicts/Lists/Tuples -> processed recursively
    """
    if hasattr(obj, "model_dump"):
        return _sanitize_for_yaml(obj.model_dump(mode="json"))
    if isinstance(obj, dict):
        return {k: _sanitize_for_yaml(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_yaml(i) for i in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def _persist_yaml_atomic(data: Any, path: Path) -> None:
    """
    Writes to a sibling temp file, fsyncs it, then renames it over *path*.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")

    with open(tmp_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=4, allow_unicode=True)
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp_path, path)
