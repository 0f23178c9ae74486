"""
Input/Output & Persistence Utilities.

YAML recipe loading and launch manifest persistence.
"""

from .serialization import load_config_from_yaml, save_as_yaml

__all__ = [
    "save_as_yaml",
    "load_config_from_yaml",
]
