"""
Kindling: GPU miner host bootstrap.

Top-level convenience API re-exporting the most commonly used components
from subpackages, so users and the ``kindling`` CLI can write:

    from kindling import Config, BootstrapOrchestrator, run_pipeline
"""

from importlib.metadata import version as _pkg_version

__version__ = _pkg_version("kindling")

from .core import (
    BootstrapOrchestrator,
    Config,
    LogStyle,
    log_pipeline_summary,
)
from .pipeline import PipelineReport, run_pipeline

__all__ = [
    "__version__",
    # Core
    "Config",
    "LogStyle",
    "BootstrapOrchestrator",
    "log_pipeline_summary",
    # Pipeline
    "PipelineReport",
    "run_pipeline",
]
