"""
Pipeline Phase Functions.

One function per bootstrap stage, all sharing a BootstrapOrchestrator for
configuration, logging and command execution. ``run_pipeline`` drives them
in order and stops at the first failed outcome.

Phases:
    1. Start: banner confirmation gate
    2. Provision: toolchain, repository, virtual environment
    3. Credentials: profile-backed storage secrets
    4. Hardware: GPU inventory
    5. Identity: coldkey, hotkeys and subnet registration
    6. Services: wandb login and bucket cleaning
    7. Launch: batch planning and pm2 restart

Each phase converts a fatal ``KindlingError`` into a failed
``PhaseOutcome``; any other exception is a bug and propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from ..core import LOGGER_NAME, LogStyle
from ..core.environment import Device, HardwareInventory, NvidiaSmiQuery
from ..credentials import CredentialStore, Prompter, TyperPrompter
from ..exceptions import KindlingError, UserAbortedError
from ..identity import (
    BtcliKeyStore,
    BtcliRegistryClient,
    IdentityProvisioner,
    IdentityReport,
    KeyStore,
    RegistryClient,
)
from ..launch import LaunchPlan, LaunchPlanner, Pm2Supervisor, ProcessSupervisor, SupervisorBridge
from ..provision import EnvironmentProvisioner, Workspace
from .services import PostIdentityServices

if TYPE_CHECKING:  # pragma: no cover
    from ..core import BootstrapOrchestrator

logger = logging.getLogger(LOGGER_NAME)

_ERR_RUNNER_NOT_INIT = "Command runner not initialized"
_ERR_WORKSPACE_NOT_READY = "Workspace not provisioned"


# RESULT TYPES


@dataclass(frozen=True)
class PhaseOutcome:
    """
    Result of one phase.

    Attributes:
        phase: Phase name.
        ok: False when the phase aborted the run.
        reason: Failure reason, or a note for a skipped phase.
        payload: Whatever the phase produced.
    """

    phase: str
    ok: bool
    reason: str = ""
    payload: Any = None


@dataclass
class PipelineReport:
    """Everything a finished (or aborted) run reports back to the CLI."""

    outcomes: list[PhaseOutcome] = field(default_factory=list)
    plans: list[LaunchPlan] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    manifest_path: Path | None = None

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def aborted_at(self) -> str | None:
        return next((o.phase for o in self.outcomes if not o.ok), None)


@dataclass
class BootstrapState:
    """Values handed from one phase to the next."""

    workspace: Workspace | None = None
    credentials: dict[str, str] = field(default_factory=dict)
    devices: list[Device] = field(default_factory=list)
    identities: IdentityReport | None = None


@dataclass
class Collaborators:
    """
    Optional replacements for the production collaborators.

    Anything left as None is built from the orchestrator's configuration
    and command runner when its phase runs.
    """

    prompter: Prompter | None = None
    provisioner: EnvironmentProvisioner | None = None
    credential_store: CredentialStore | None = None
    inventory: HardwareInventory | None = None
    keystore: KeyStore | None = None
    registry: RegistryClient | None = None
    services: PostIdentityServices | None = None
    supervisor: ProcessSupervisor | None = None


# PHASES


def run_start_gate(orchestrator: BootstrapOrchestrator, prompter: Prompter | None = None) -> None:
    """
    Ask before touching the host.

    Raises:
        UserAbortedError: The user declined.
    """
    if not orchestrator.cfg.interactive.confirm_start:
        return
    prompter = prompter or TyperPrompter()
    if not prompter.confirm("Continue with the bootstrap?", default=True):
        raise UserAbortedError("Aborted by user.")


def run_provision_phase(
    orchestrator: BootstrapOrchestrator,
    provisioner: EnvironmentProvisioner | None = None,
) -> Workspace:
    """Install the toolchain and prepare the worker workspace."""
    runner = orchestrator.runner
    assert runner is not None, _ERR_RUNNER_NOT_INIT  # nosec B101
    assert orchestrator.platform is not None, "Platform not detected"  # nosec B101

    LogStyle.log_phase_header(orchestrator.run_logger or logger, "ENVIRONMENT PROVISIONING")
    provisioner = provisioner or EnvironmentProvisioner.for_host(
        orchestrator.platform, runner, orchestrator.cfg.provision
    )
    return provisioner.provision()


def run_credentials_phase(
    orchestrator: BootstrapOrchestrator,
    store: CredentialStore | None = None,
    prompter: Prompter | None = None,
) -> dict[str, str]:
    """
    Resolve credentials and export them to every later command.
    """
    runner = orchestrator.runner
    assert runner is not None, _ERR_RUNNER_NOT_INIT  # nosec B101

    LogStyle.log_phase_header(orchestrator.run_logger or logger, "CREDENTIALS")
    store = store or CredentialStore(orchestrator.cfg.credentials, prompter=prompter)
    credentials = store.load_or_collect()
    runner.update_env(credentials)
    return credentials


def run_hardware_phase(
    orchestrator: BootstrapOrchestrator,
    inventory: HardwareInventory | None = None,
) -> list[Device]:
    runner = orchestrator.runner
    assert runner is not None, _ERR_RUNNER_NOT_INIT  # nosec B101

    run_logger = orchestrator.run_logger or logger
    LogStyle.log_phase_header(run_logger, "HARDWARE INVENTORY")
    LogStyle.step(run_logger, "Checking for GPUs...")
    inventory = inventory or HardwareInventory(
        NvidiaSmiQuery(runner, orchestrator.cfg.hardware.query_tool)
    )
    return inventory.enumerate_devices()


def run_identity_phase(
    orchestrator: BootstrapOrchestrator,
    workspace: Workspace,
    device_count: int,
    keystore: KeyStore | None = None,
    registry: RegistryClient | None = None,
) -> IdentityReport:
    """Ensure the coldkey and one registered hotkey per GPU."""
    runner = orchestrator.runner
    assert runner is not None, _ERR_RUNNER_NOT_INIT  # nosec B101

    LogStyle.log_phase_header(orchestrator.run_logger or logger, "WALLET IDENTITIES")
    wallet_cfg = orchestrator.cfg.wallet
    keystore = keystore or BtcliKeyStore(runner, wallet_cfg)
    registry = registry or BtcliRegistryClient(runner, wallet_cfg, workspace.venv_python)
    return IdentityProvisioner(keystore, registry, wallet_cfg).ensure_identities(device_count)


def run_services_phase(
    orchestrator: BootstrapOrchestrator,
    workspace: Workspace,
    credentials: dict[str, str],
    services: PostIdentityServices | None = None,
) -> None:
    runner = orchestrator.runner
    assert runner is not None, _ERR_RUNNER_NOT_INIT  # nosec B101

    LogStyle.log_phase_header(orchestrator.run_logger or logger, "SERVICES")
    services = services or PostIdentityServices(runner, orchestrator.cfg.services)
    bucket = credentials[orchestrator.cfg.credentials.bucket_variable]
    services.run_all(workspace, bucket)


def run_launch_phase(
    orchestrator: BootstrapOrchestrator,
    state: BootstrapState,
    supervisor: ProcessSupervisor | None = None,
) -> tuple[list[LaunchPlan], list[str]]:
    """
    Plan one worker per launchable GPU and restart the pm2 table.

    Returns:
        tuple of (launched plans, planning warnings)
    """
    runner = orchestrator.runner
    assert runner is not None, _ERR_RUNNER_NOT_INIT  # nosec B101
    assert state.workspace is not None, _ERR_WORKSPACE_NOT_READY  # nosec B101
    assert state.identities is not None, "Identities not provisioned"  # nosec B101

    cfg = orchestrator.cfg
    run_logger = orchestrator.run_logger or logger
    LogStyle.log_phase_header(run_logger, "WORKER LAUNCH", LogStyle.DOUBLE)

    planner = LaunchPlanner(
        cfg.launch,
        cfg.wallet,
        script=state.workspace.script(cfg.launch.script),
        interpreter=state.workspace.venv_python,
        bucket_variable=cfg.credentials.bucket_variable,
    )
    plan_set = planner.plan_all(state.devices, state.identities, state.credentials)
    orchestrator.reporter.log_launch_plans(run_logger, plan_set.plans)

    bridge = SupervisorBridge(supervisor or Pm2Supervisor(runner))
    bridge.restart_all(plan_set.plans)
    return plan_set.plans, plan_set.warnings


# DRIVER


def _guarded(name: str, action: Callable[[], Any]) -> PhaseOutcome:
    """Run *action* and convert a ``KindlingError`` into a failed outcome."""
    try:
        return PhaseOutcome(phase=name, ok=True, payload=action())
    except KindlingError as e:
        logger.error(f"{LogStyle.FAILURE} {name} failed: {e}")
        return PhaseOutcome(phase=name, ok=False, reason=str(e))


def run_pipeline(
    orchestrator: BootstrapOrchestrator,
    collaborators: Collaborators | None = None,
) -> PipelineReport:
    """
    Run every phase in order, stopping at the first failure.

    With zero GPUs the primary identity is still ensured, but services and
    launch are skipped and the supervisor is never touched.

    Example:
        >>> with BootstrapOrchestrator(cfg) as orch:
        ...     report = run_pipeline(orch)
        ...     sys.exit(0 if report.ok else 1)
    """
    c = collaborators or Collaborators()
    state = BootstrapState()
    report = PipelineReport()

    def step(name: str, action: Callable[[], Any]) -> bool:
        outcome = _guarded(name, action)
        report.outcomes.append(outcome)
        return outcome.ok

    if not step("start", lambda: run_start_gate(orchestrator, c.prompter)):
        return report
    orchestrator.log_environment_report()

    if not step("provision", lambda: run_provision_phase(orchestrator, c.provisioner)):
        return report
    state.workspace = report.outcomes[-1].payload

    if not step(
        "credentials",
        lambda: run_credentials_phase(orchestrator, c.credential_store, c.prompter),
    ):
        return report
    state.credentials = report.outcomes[-1].payload

    if not step("hardware", lambda: run_hardware_phase(orchestrator, c.inventory)):
        return report
    state.devices = report.outcomes[-1].payload

    workspace = state.workspace
    if not step(
        "identity",
        lambda: run_identity_phase(
            orchestrator, workspace, len(state.devices), c.keystore, c.registry
        ),
    ):
        return report
    state.identities = report.outcomes[-1].payload
    report.warnings.extend(state.identities.warnings)

    if not state.devices:
        note = "No GPUs found. Skipping miner startup."
        LogStyle.warn(orchestrator.run_logger or logger, note)
        report.warnings.append(note)
        report.outcomes.append(PhaseOutcome(phase="services", ok=True, reason="skipped"))
        report.outcomes.append(PhaseOutcome(phase="launch", ok=True, reason="skipped"))
        return report

    if not step(
        "services",
        lambda: run_services_phase(orchestrator, workspace, state.credentials, c.services),
    ):
        return report

    if not step("launch", lambda: run_launch_phase(orchestrator, state, c.supervisor)):
        return report
    plans, warnings = report.outcomes[-1].payload
    report.plans = plans
    report.warnings.extend(warnings)
    report.manifest_path = orchestrator.save_launch_manifest(plans)
    return report
