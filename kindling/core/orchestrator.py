"""
Bootstrap Lifecycle Orchestration.

This module provides BootstrapOrchestrator, the central coordinator for a
bootstrap run. It owns everything the pipeline stages share: the resolved
configuration, the session logger, the host lock, the detected platform and
the ``CommandRunner`` every stage shells out through.

Architecture:

- Dependency Injection: All external dependencies are injectable for testability
- 4-Phase Initialization: Sequential setup from filesystem to command runtime
- Context Manager: Automatic resource acquisition and cleanup
- Protocol-Based: type-safe abstractions for mockability

Related Protocols (defined in their respective modules):

- ``ReporterProtocol``: ``logger/reporter.py``
- ``TimeTrackerProtocol``: ``environment/timing.py``

Example:
    >>> from kindling.core import BootstrapOrchestrator, Config
    >>> cfg = Config.from_cli(debug=False, project="aesop")
    >>> with BootstrapOrchestrator(cfg) as orchestrator:
    ...     orchestrator.log_environment_report()
    ...     report = run_pipeline(orchestrator)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Literal, Sequence, TypeVar

from .environment import (
    CommandRunner,
    HostPlatform,
    detect_platform,
    ensure_single_instance,
    release_single_instance,
    system_memory_gb,
)
from .environment.timing import TimeTracker, TimeTrackerProtocol
from .io import save_as_yaml
from .logger import Logger, Reporter
from .logger.reporter import ReporterProtocol
from .paths import LOGGER_NAME, setup_static_directories

if TYPE_CHECKING:  # pragma: no cover
    from ..launch import LaunchPlan
    from .config.manifest import Config

logger = logging.getLogger(LOGGER_NAME)

T = TypeVar("T")


def _resolve(value: T | None, default_factory: Callable[[], T]) -> T:
    """
    Resolve optional dependency with lazy default instantiation.

    Args:
        value: Caller-supplied dependency, or None to use the default.
        default_factory: Zero-argument callable that produces the default
            instance (e.g., ``Reporter``, ``TimeTracker``).

    Returns:
        The provided value, or a fresh default.
    """
    return value if value is not None else default_factory()


# BOOTSTRAP ORCHESTRATOR
class BootstrapOrchestrator:
    """
    Central coordinator for the bootstrap lifecycle.

    Initialization Phases:

    1. Filesystem Provisioning: state and log directories
    2. Logging Initialization: level from telemetry, optional rotating file
    3. Infrastructure Guarding: host-wide advisory lock
    4. Command Runtime: platform detection and the shared CommandRunner

    Dependency Injection:

    - reporter: Environment telemetry engine
    - time_tracker: Run duration tracker
    - log_initializer: Logging setup strategy
    - static_dir_setup: Static directory creation
    - lock_acquirer / lock_releaser: Host lock strategy
    - platform_detector: OS detection
    - runner: Pre-built CommandRunner (tests pass a fake)
    - manifest_saver: YAML persistence function
    - ram_probe: Host RAM reader

    Attributes:
        cfg (Config): Validated global configuration (Single Source of Truth)
        reporter (ReporterProtocol): Environment telemetry engine
        time_tracker (TimeTrackerProtocol): Run duration tracker
        run_logger (logging.Logger | None): Active logger instance
        platform (HostPlatform | None): Detected host platform
        runner (CommandRunner | None): Shared command runner
    """

    def __init__(
        self,
        cfg: "Config",
        reporter: ReporterProtocol | None = None,
        time_tracker: TimeTrackerProtocol | None = None,
        log_initializer: Callable | None = None,
        static_dir_setup: Callable | None = None,
        lock_acquirer: Callable | None = None,
        lock_releaser: Callable | None = None,
        platform_detector: Callable[[], HostPlatform] | None = None,
        runner: CommandRunner | None = None,
        manifest_saver: Callable | None = None,
        ram_probe: Callable[[], float | None] | None = None,
    ) -> None:
        self.cfg = cfg

        self.reporter = _resolve(reporter, Reporter)
        self.time_tracker = _resolve(time_tracker, TimeTracker)
        self._log_initializer = log_initializer or Logger.setup
        self._static_dir_setup = static_dir_setup or setup_static_directories
        self._lock_acquirer = lock_acquirer or ensure_single_instance
        self._lock_releaser = lock_releaser or release_single_instance
        self._platform_detector = platform_detector or detect_platform
        self._manifest_saver = manifest_saver or save_as_yaml
        self._ram_probe = ram_probe or system_memory_gb

        # Lazy initialization
        self._initialized: bool = False
        self._lock_held: bool = False
        self.run_logger: logging.Logger | None = None
        self.platform: HostPlatform | None = None
        self.runner: CommandRunner | None = runner

    def __enter__(self) -> "BootstrapOrchestrator":
        """
        Context Manager entry: starts the timer and runs the initialization
        phases. Partial resources are released before re-raising on failure.
        """
        try:
            self.time_tracker.start()
            self.initialize_core_services()
            return self
        except Exception:
            self.cleanup()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb) -> Literal[False]:
        """Stops the timer and releases resources; exceptions propagate."""
        self.time_tracker.stop()
        self.cleanup()
        return False

    # --- Private Lifecycle Phases ---

    def _phase_1_filesystem_provisioning(self) -> None:
        logger.debug("Phase 1: Provisioning state directories")  # pragma: no mutant
        self._static_dir_setup()
        self.cfg.telemetry.state_dir.mkdir(parents=True, exist_ok=True)

    def _phase_2_logging_initialization(self) -> None:
        """Reconfigures handlers with the effective level and optional file log."""
        logger.debug("Phase 2: Initializing session logging")  # pragma: no mutant
        telemetry = self.cfg.telemetry
        self.run_logger = self._log_initializer(
            name=LOGGER_NAME,
            log_dir=telemetry.log_dir if telemetry.log_to_file else None,
            level=telemetry.effective_log_level,
        )

    def _phase_3_infrastructure_guarding(self) -> None:
        """Acquires the host lock; a second concurrent run exits here."""
        logger.debug("Phase 3: Acquiring bootstrap lock")  # pragma: no mutant
        phase_logger = self.run_logger or logger
        self._lock_acquirer(self.cfg.hardware.lock_file_path, phase_logger)
        self._lock_held = True

    def _phase_4_command_runtime(self) -> None:
        logger.debug("Phase 4: Detecting platform")  # pragma: no mutant
        self.platform = self._platform_detector()
        if self.runner is None:
            self.runner = CommandRunner(
                verbose=self.cfg.telemetry.debug,
                timeout=self.cfg.provision.command_timeout,
            )

    def _close_logging_handlers(self) -> None:
        """Flush and close the session handlers so the log file is complete."""
        if self.run_logger:
            for handler in self.run_logger.handlers[:]:
                handler.close()
                self.run_logger.removeHandler(handler)

    # --- Public Interface ---

    def initialize_core_services(self) -> None:
        """
        Executes the initialization phases once.

        Idempotent: guarded by ``_initialized`` so re-entry never acquires
        the lock twice.
        """
        if self._initialized:
            return

        self._phase_1_filesystem_provisioning()
        self._phase_2_logging_initialization()
        self._phase_3_infrastructure_guarding()
        self._phase_4_command_runtime()

        self._initialized = True

    def log_environment_report(self) -> None:
        """Emit the environment initialization report."""
        assert self.platform is not None, "Platform not detected"  # nosec B101
        self.reporter.log_initial_status(
            logger_instance=self.run_logger or logger,
            cfg=self.cfg,
            platform=self.platform,
            ram_gb=self._ram_probe(),
        )

    def save_launch_manifest(self, plans: Sequence["LaunchPlan"]) -> Path:
        """
        Persist the launched plans for later inspection.

        Returns:
            Path of the written manifest.
        """
        path = self.cfg.telemetry.manifest_path
        data: dict[str, Any] = {
            "project": self.cfg.launch.project,
            "wallet": self.cfg.wallet.name,
            "netuid": self.cfg.wallet.netuid,
            "workers": [plan.to_dict() for plan in plans],
        }
        self._manifest_saver(data=data, yaml_path=path)
        return path

    def cleanup(self) -> None:
        """Releases the host lock and closes logging handlers."""
        cleanup_logger = self.run_logger or logger
        if self._lock_held:
            try:
                self._lock_releaser(self.cfg.hardware.lock_file_path)
            except OSError as e:
                cleanup_logger.error(f"Failed to release bootstrap lock: {e}")
            self._lock_held = False

        self._close_logging_handlers()
