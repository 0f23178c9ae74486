"""
Worker Workspace.

Locates or clones the worker repository and prepares its virtual
environment. Every step checks for its own result first, so re-running on
a prepared host only re-executes the pip installs.
"""

from __future__ import annotations

import logging
import os
import subprocess  # nosec B404
from dataclasses import dataclass
from pathlib import Path

from ..core.config import ProvisionConfig
from ..core.environment import CommandRunner
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import InstallFailedError, MissingToolError

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class Workspace:
    """
    Prepared worker codebase.

    Attributes:
        repo_path: Root of the worker repository.
        venv_path: Virtual environment inside the repository.
    """

    repo_path: Path
    venv_path: Path

    @property
    def venv_python(self) -> Path:
        """Interpreter inside the virtual environment."""
        if os.name == "nt":  # pragma: no cover
            return self.venv_path / "Scripts" / "python.exe"
        return self.venv_path / "bin" / "python"

    def script(self, relative: str) -> Path:
        """Absolute path of a file inside the repository."""
        return self.repo_path / relative


class WorkspaceBuilder:
    """
    Resolves the repository and provisions its virtual environment.

    Attributes:
        runner (CommandRunner): Executes git, venv and pip commands.
        cfg (ProvisionConfig): Repository location and package policy.
        cwd (Path): Directory the bootstrap was started from.
    """

    def __init__(self, runner: CommandRunner, cfg: ProvisionConfig, cwd: Path | None = None) -> None:
        self.runner = runner
        self.cfg = cfg
        self.cwd = cwd or Path.cwd()

    def locate_repository(self) -> Path:
        """
        Use the enclosing git work tree, else ``<cwd>/<repo_dir>``, cloning
        it when absent.

        Raises:
            InstallFailedError: If the clone fails.
        """
        LogStyle.step(logger, f"Installing {self.cfg.repo_dir} ...")
        if self.runner.succeeds(["git", "rev-parse", "--is-inside-work-tree"], cwd=self.cwd):
            repo = self.cwd
        else:
            repo = self.cwd / self.cfg.repo_dir
            if not repo.is_dir():
                LogStyle.step(logger, f"Cloning {self.cfg.repo_url} ...")
                self._run(["git", "clone", self.cfg.repo_url, str(repo)], "clone repository")
        LogStyle.done(logger, f"Pulled {self.cfg.repo_dir} {repo}")
        return repo

    def ensure_venv(self, repo: Path) -> Path:
        """Create ``<repo>/<venv_dir>`` with the pinned interpreter unless present."""
        venv = repo / self.cfg.venv_dir
        if not venv.is_dir():
            interpreter = self.runner.which(self.cfg.python_executable)
            if interpreter is None:
                raise MissingToolError(f"{self.cfg.python_executable} not found on PATH")
            LogStyle.step(logger, f"Creating virtual environment at {venv} ...")
            self._run([interpreter, "-m", "venv", str(venv)], "create virtual environment")
        LogStyle.done(logger, f"Created venv at {venv}")
        return venv

    def install_requirements(self, workspace: Workspace) -> None:
        """Install the repository requirements, then force-upgrade the extras."""
        python = str(workspace.venv_python)
        requirements = workspace.script(self.cfg.requirements_file)

        LogStyle.step(logger, "Installing python requirements ...")
        self._run([python, "-m", "pip", "install", "-r", str(requirements)], "install requirements")
        if self.cfg.extra_pip_packages:
            self._run(
                [python, "-m", "pip", "install", "--upgrade", *self.cfg.extra_pip_packages],
                "upgrade extra packages",
            )
        LogStyle.done(logger, "Installed requirements")

    def build(self) -> Workspace:
        repo = self.locate_repository()
        workspace = Workspace(repo_path=repo, venv_path=self.ensure_venv(repo))
        self.install_requirements(workspace)
        return workspace

    def _run(self, cmd: list[str], what: str) -> None:
        try:
            self.runner.run(cmd)
        except FileNotFoundError as e:
            raise MissingToolError(f"Failed to {what}: {e.filename} not found") from e
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise InstallFailedError(f"Failed to {what}: {e}") from e
