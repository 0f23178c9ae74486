"""
Environment Provisioner.

Runs the host toolchain through the ``IdempotentInstaller`` in order and
then prepares the worker workspace. The first FAILED step aborts the
sequence by raising; nothing already installed is undone.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.config import ProvisionConfig
from ..core.environment import CommandRunner, HostPlatform
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import InstallFailedError, KindlingError
from .installer import IdempotentInstaller
from .recipes import RecipeBook
from .results import Dependency, StepResult
from .workspace import Workspace, WorkspaceBuilder

logger = logging.getLogger(LOGGER_NAME)


class EnvironmentProvisioner:
    """
    Installs the toolchain and returns a ready ``Workspace``.

    Attributes:
        dependencies (list[Dependency]): Ordered toolchain.
        installer (IdempotentInstaller): Probe/install driver.
        workspace_builder (WorkspaceBuilder): Repository and venv setup.
    """

    def __init__(
        self,
        dependencies: list[Dependency],
        workspace_builder: WorkspaceBuilder,
        installer: IdempotentInstaller | None = None,
    ) -> None:
        self.dependencies = dependencies
        self.workspace_builder = workspace_builder
        self.installer = installer or IdempotentInstaller()
        self.results: list[StepResult] = []

    @classmethod
    def for_host(
        cls,
        platform: HostPlatform,
        runner: CommandRunner,
        cfg: ProvisionConfig,
        cwd: Path | None = None,
    ) -> "EnvironmentProvisioner":
        """Wire the default recipes and workspace builder for *platform*."""
        recipes = RecipeBook(platform, runner, cfg)
        return cls(recipes.toolchain(), WorkspaceBuilder(runner, cfg, cwd=cwd))

    def install_toolchain(self) -> list[StepResult]:
        """
        Ensure every dependency in order.

        Raises:
            KindlingError: The failing step's own error when it was a
                KindlingError (e.g. ``UnsupportedPlatformError``), otherwise
                ``InstallFailedError``.
        """
        LogStyle.step(logger, "Installing requirements ...")
        for dep in self.dependencies:
            result = self.installer.ensure(dep)
            self.results.append(result)
            if not result.ok:
                if isinstance(result.error, KindlingError):
                    raise result.error
                raise InstallFailedError(f"Failed to install {result.name}: {result.reason}")
        return self.results

    def provision(self) -> Workspace:
        self.install_toolchain()
        return self.workspace_builder.build()
