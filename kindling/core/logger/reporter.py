"""
Environment & Launch Reporting Engine.

Provides formatted logging utilities for the BootstrapOrchestrator.
Centralizes the heavier report blocks so the stages themselves only emit
single status lines.

The reporter handles:
    - Host and configuration baseline visualization
    - Launch plan tables
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from ..paths import LOGGER_NAME
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ...launch import LaunchPlan
    from ..config import Config
    from ..environment import HostPlatform

logger = logging.getLogger(LOGGER_NAME)


class ReporterProtocol(Protocol):
    """Protocol for environment reporting (allows mocking in tests)."""

    def log_initial_status(
        self,
        logger_instance: logging.Logger,
        cfg: "Config",
        platform: "HostPlatform",
        ram_gb: float | None,
    ) -> None: ...  # pragma: no cover

    def log_launch_plans(
        self, logger_instance: logging.Logger, plans: Sequence["LaunchPlan"]
    ) -> None: ...  # pragma: no cover


class Reporter(BaseModel):
    """
    Centralized logging and reporting utility for bootstrap lifecycle events.

    Transforms configuration state and host facts into human-readable logs.
    Called by the orchestrator during initialization and before launch.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def log_initial_status(
        self,
        logger_instance: logging.Logger,
        cfg: "Config",
        platform: "HostPlatform",
        ram_gb: float | None,
    ) -> None:
        """
        Logs the verified baseline before any stage runs.

        Args:
            logger_instance: Active bootstrap logger
            cfg: Validated global configuration manifest
            platform: Detected host platform
            ram_gb: Host RAM in GiB, None when unknown
        """
        LogStyle.log_phase_header(logger_instance, "ENVIRONMENT INITIALIZATION", LogStyle.HEAVY)

        self._log_host_section(logger_instance, platform, ram_gb)
        logger_instance.info("")

        self._log_workspace_section(logger_instance, cfg)
        logger_instance.info("")

        self._log_subnet_section(logger_instance, cfg)
        logger_instance.info("")

        logger_instance.info("[FILESYSTEM]")
        logger_instance.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Profile':<18}: {cfg.credentials.profile}"
        )
        logger_instance.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'State Dir':<18}: {cfg.telemetry.state_dir}"
        )

        logger_instance.info(LogStyle.HEAVY)
        logger_instance.info("")

    def _log_host_section(
        self, logger_instance: logging.Logger, platform: "HostPlatform", ram_gb: float | None
    ) -> None:
        """Logs OS and memory facts."""
        logger_instance.info("[HOST]")
        logger_instance.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Platform':<18}: {platform.label}")
        if ram_gb is not None:
            logger_instance.info(
                f"{LogStyle.INDENT}{LogStyle.ARROW} {'System RAM':<18}: {ram_gb:.1f} GB"
            )
        else:
            logger_instance.warning(f"{LogStyle.INDENT}{LogStyle.WARNING} System RAM unknown")

    def _log_workspace_section(self, logger_instance: logging.Logger, cfg: "Config") -> None:
        prov = cfg.provision
        timeout = f"{prov.command_timeout:g}s" if prov.command_timeout else "none"

        logger_instance.info("[WORKSPACE]")
        logger_instance.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Repository':<18}: {prov.repo_url}")
        logger_instance.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Interpreter':<18}: {prov.python_executable}"
        )
        logger_instance.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Command Timeout':<18}: {timeout}")
        logger_instance.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Debug Output':<18}: {cfg.telemetry.debug}"
        )

    def _log_subnet_section(self, logger_instance: logging.Logger, cfg: "Config") -> None:
        wallet = cfg.wallet
        logger_instance.info("[SUBNET]")
        logger_instance.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Wallet':<18}: {wallet.name}")
        logger_instance.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Netuid':<18}: {wallet.netuid} ({wallet.network})"
        )
        logger_instance.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Project':<18}: {cfg.launch.project}"
        )

    def log_launch_plans(
        self, logger_instance: logging.Logger, plans: Sequence["LaunchPlan"]
    ) -> None:
        """Logs one line per planned worker."""
        if not plans:
            logger_instance.warning(f"{LogStyle.INDENT}{LogStyle.WARNING} No workers to launch")
            return
        for plan in plans:
            logger_instance.info(
                f"{LogStyle.INDENT}{LogStyle.BULLET} {plan.process_name:<6} "
                f"{plan.device:<8} tier {plan.tier:<3} batch {plan.batch_size}"
            )
