"""
Pipeline Orchestration Module.

Provides the phase functions of a bootstrap run and the driver that chains
them:

- Start gate, provisioning, credentials, hardware inventory
- Identity provisioning, post-identity services, worker launch

Example:
    >>> from kindling.pipeline import run_pipeline
    >>> with BootstrapOrchestrator(cfg) as orch:
    ...     report = run_pipeline(orch)
"""

from .phases import (
    BootstrapState,
    Collaborators,
    PhaseOutcome,
    PipelineReport,
    run_credentials_phase,
    run_hardware_phase,
    run_identity_phase,
    run_launch_phase,
    run_pipeline,
    run_provision_phase,
    run_services_phase,
    run_start_gate,
)
from .services import PostIdentityServices

__all__ = [
    "BootstrapState",
    "Collaborators",
    "PhaseOutcome",
    "PipelineReport",
    "PostIdentityServices",
    "run_start_gate",
    "run_provision_phase",
    "run_credentials_phase",
    "run_hardware_phase",
    "run_identity_phase",
    "run_services_phase",
    "run_launch_phase",
    "run_pipeline",
]
