"""
Pipeline Completion Logging.

Renders the closing summary of a bootstrap run from its ``PipelineReport``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..paths import LOGGER_NAME
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ...pipeline import PipelineReport

logger = logging.getLogger(LOGGER_NAME)


def log_pipeline_summary(
    report: "PipelineReport",
    duration: str,
    manifest_path: Path | None = None,
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log final pipeline summary.

    Called once at the end of the run, whether it completed or aborted.

    Args:
        report: Ordered phase outcomes plus launched plans and warnings
        duration: Human-readable duration string
        manifest_path: Where the launch manifest was written (if it was)
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger

    title = "BOOTSTRAP COMPLETE" if report.ok else "BOOTSTRAP ABORTED"
    LogStyle.log_phase_header(log, title, LogStyle.DOUBLE)

    for outcome in report.outcomes:
        symbol = LogStyle.SUCCESS if outcome.ok else LogStyle.FAILURE
        line = f"{LogStyle.INDENT}{symbol} {outcome.phase:<14}"
        if outcome.ok:
            log.info(line)
        else:
            log.error(f"{line} {outcome.reason}")

    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Workers        : {len(report.plans)}")
    if report.warnings:
        log.warning(f"{LogStyle.INDENT}{LogStyle.WARNING} Warnings       : {len(report.warnings)}")
        for warning in report.warnings:
            log.warning(f"{LogStyle.DOUBLE_INDENT}{LogStyle.BULLET} {warning}")
    if manifest_path is not None:
        log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Manifest       : {manifest_path}")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Duration       : {duration}")
    log.info(LogStyle.DOUBLE)
