"""
Telemetry and Reporting Package.

This package centralizes bootstrap logging and reporting. It provides
high-level utilities to initialize the console and file loggers and to
format host facts and the final run summary.

Available Components:

- Logger: Static utility for stream and file logging initialization.
- Reporter: Reporting engine for the environment baseline and launch plans.
- LogStyle: Unified logging style constants.
- log_pipeline_summary: Closing summary of a run.
"""

from .logger import Logger
from .progress import log_pipeline_summary
from .reporter import Reporter, ReporterProtocol
from .styles import LogStyle

__all__ = [
    "Logger",
    "Reporter",
    "ReporterProtocol",
    "LogStyle",
    "log_pipeline_summary",
]
