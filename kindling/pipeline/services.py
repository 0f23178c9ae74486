"""
Post-Identity Services.

External steps that run once identities exist and before workers start:
logging the worker environment into wandb and clearing stale objects from
the storage bucket with the repository's own cleaning tool. Both are
skippable by configuration and fatal when they run and fail.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404

from ..core.config import ServicesConfig
from ..core.environment import CommandRunner
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import InstallFailedError, MissingToolError
from ..provision import Workspace

logger = logging.getLogger(LOGGER_NAME)


class PostIdentityServices:
    """
    Runs wandb login and bucket cleaning inside the worker workspace.

    Attributes:
        runner (CommandRunner): Executes the commands.
        cfg (ServicesConfig): Which services run.
    """

    def __init__(self, runner: CommandRunner, cfg: ServicesConfig) -> None:
        self.runner = runner
        self.cfg = cfg

    def wandb_executable(self, workspace: Workspace) -> str:
        """The venv's wandb when present, else whatever is on PATH."""
        candidate = workspace.venv_python.parent / "wandb"
        return str(candidate) if candidate.exists() else "wandb"

    def wandb_login(self, workspace: Workspace) -> None:
        if not self.cfg.wandb_login:
            logger.debug("wandb login disabled")
            return
        LogStyle.step(logger, "Logging into wandb...")
        # login may prompt for an API key
        self._run([self.wandb_executable(workspace), "login"], "log into wandb", interactive=True)
        LogStyle.done(logger, "Initialized wandb")

    def clean_bucket(self, workspace: Workspace, bucket: str) -> None:
        if not self.cfg.clean_bucket:
            logger.debug("bucket cleaning disabled")
            return
        LogStyle.step(logger, f"Cleaning bucket {bucket}...")
        script = workspace.script(self.cfg.clean_script)
        self._run(
            [str(workspace.venv_python), str(script), "--bucket", bucket], f"clean bucket {bucket}"
        )
        LogStyle.done(logger, "Cleaned bucket")

    def run_all(self, workspace: Workspace, bucket: str) -> None:
        self.wandb_login(workspace)
        self.clean_bucket(workspace, bucket)

    def _run(self, cmd: list[str], what: str, interactive: bool = False) -> None:
        try:
            self.runner.run(cmd, interactive=interactive)
        except FileNotFoundError as e:
            raise MissingToolError(f"Failed to {what}: {e.filename} not found") from e
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise InstallFailedError(f"Failed to {what}: {e}") from e
