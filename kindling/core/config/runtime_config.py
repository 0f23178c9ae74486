"""
Runtime Policy Manifests.

Small sections that steer how the pipeline behaves rather than what it
installs: interactive gates, optional post-identity services, telemetry and
host-level guards.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..paths import LOG_DIR, STATE_DIR
from .types import LogLevel, ValidatedPath


class InteractiveConfig(BaseModel):
    """
    Interactive gates.

    Attributes:
        confirm_start: Ask for confirmation before touching the host.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    confirm_start: bool = True


class ServicesConfig(BaseModel):
    """
    Post-identity services.

    Attributes:
        wandb_login: Run ``wandb login`` before launching workers.
        clean_bucket: Run the repository's bucket cleaning tool.
        clean_script: Cleaning tool path relative to the repository root.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    wandb_login: bool = True
    clean_bucket: bool = True
    clean_script: str = "tools/clean.py"


class TelemetryConfig(BaseModel):
    """
    Logging and state persistence policy.

    Attributes:
        debug: Stream external command output instead of suppressing it.
        log_level: Logging verbosity.
        log_to_file: Mirror console output into a rotating log file.
        log_dir: Directory for bootstrap logs.
        state_dir: Directory for the launch manifest.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    debug: bool = False
    log_level: LogLevel = "INFO"
    log_to_file: bool = True
    log_dir: ValidatedPath = Field(default=LOG_DIR)  # type: ignore[assignment]
    state_dir: ValidatedPath = Field(default=STATE_DIR)  # type: ignore[assignment]

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """Treat an empty ``telemetry:`` YAML section as all defaults."""
        if data is None:
            return {}
        return data

    @property
    def effective_log_level(self) -> str:
        """DEBUG whenever debug output is requested, otherwise ``log_level``."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def manifest_path(self) -> Path:
        """Where the last launch manifest is written."""
        return self.state_dir / "launch_manifest.yaml"


class HardwareConfig(BaseModel):
    """
    Hardware query and host guard settings.

    Attributes:
        query_tool: GPU query executable.
        lock_name: Stem of the advisory lock file that serializes bootstrap runs.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    query_tool: str = "nvidia-smi"
    lock_name: str = Field(default="kindling", pattern=r"^[A-Za-z0-9_-]+$")

    @property
    def lock_file_path(self) -> Path:
        """Lock file in the system temp directory."""
        return Path(tempfile.gettempdir()) / f"{self.lock_name}.lock"
