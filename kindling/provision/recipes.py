"""
Install Recipes.

Per-dependency probe and install actions for the host toolchain. The
install action for each dependency is chosen once from the detected
platform:

    * Debian family (ID or ID_LIKE ubuntu/debian): apt, with sudo
    * macOS: Homebrew, installing Homebrew itself first when missing
    * anything else: an action that raises ``UnsupportedPlatformError``

Remote installer scripts are downloaded with ``curl`` and fed to ``bash``
on stdin, never through a shell string.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..core.config import ProvisionConfig
from ..core.environment import CommandRunner, HostPlatform
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import UnsupportedPlatformError
from .results import Dependency

logger = logging.getLogger(LOGGER_NAME)

InstallAction = Callable[[], None]


def select_action(
    platform: HostPlatform,
    *,
    debian: InstallAction,
    macos: InstallAction,
    what: str,
) -> InstallAction:
    """
    Pick the install action matching *platform*.

    Returns an action that raises ``UnsupportedPlatformError`` when the
    platform has no recipe, so the failure surfaces through the installer
    as a FAILED step rather than at selection time.
    """
    if platform.is_debian_family:
        return debian
    if platform.is_macos:
        return macos

    def unsupported() -> None:
        raise UnsupportedPlatformError(f"Cannot install {what} automatically on {platform.label}")

    return unsupported


class RecipeBook:
    """
    Builds the ordered toolchain dependencies for one host.

    Attributes:
        platform (HostPlatform): Detected OS and distribution.
        runner (CommandRunner): Executes install commands.
        cfg (ProvisionConfig): Versions, package names and installer URLs.
    """

    def __init__(self, platform: HostPlatform, runner: CommandRunner, cfg: ProvisionConfig) -> None:
        self.platform = platform
        self.runner = runner
        self.cfg = cfg
        self._apt_updated = False

    # SHARED PACKAGE MANAGER HELPERS

    def _apt_update(self) -> None:
        if not self._apt_updated:
            self.runner.run(["apt-get", "update", "-y"], sudo=True)
            self._apt_updated = True

    def _apt_install(self, *packages: str) -> None:
        self._apt_update()
        self.runner.run(["apt-get", "install", "-y", *packages], sudo=True)

    def _ensure_brew(self) -> None:
        if self.runner.which("brew") is not None:
            return
        LogStyle.warn(logger, "Homebrew is not installed, installing Homebrew...")
        script = self.runner.output(["curl", "-fsSL", self.cfg.homebrew_install_url])
        self.runner.update_env({"NONINTERACTIVE": "1"})
        self.runner.run(["/bin/bash", "-"], input=script)

    def _brew_install(self, formula: str) -> None:
        self._ensure_brew()
        self.runner.run(["brew", "install", formula])

    def _has(self, *executables: str) -> bool:
        return all(self.runner.which(name) is not None for name in executables)

    # DEPENDENCIES

    def git(self) -> Dependency:
        return Dependency(
            name="git",
            probe=lambda: self._has("git"),
            install=select_action(
                self.platform,
                debian=lambda: self._apt_install("git"),
                macos=lambda: self._brew_install("git"),
                what="git",
            ),
        )

    def node(self) -> Dependency:
        """Node.js together with npm (NodeSource on Debian, Homebrew on macOS)."""

        def debian() -> None:
            if not self._has("node"):
                script = self.runner.output(["curl", "-fsSL", self.cfg.nodesource_url])
                self.runner.run(["bash", "-"], sudo=True, preserve_env=True, input=script)
            self._apt_install("nodejs")

        return Dependency(
            name="npm",
            probe=lambda: self._has("node", "npm"),
            install=select_action(
                self.platform,
                debian=debian,
                macos=lambda: self._brew_install("node"),
                what="Node.js",
            ),
        )

    def pm2(self) -> Dependency:
        # npm is already ensured, so the action is the same everywhere
        return Dependency(
            name="pm2",
            probe=lambda: self._has("pm2"),
            install=lambda: self.runner.run(
                ["npm", "install", "-g", "pm2"], sudo=self.platform.is_linux
            ),
        )

    def python(self) -> Dependency:
        """Pinned interpreter (deadsnakes on Debian, Homebrew on macOS)."""
        executable = self.cfg.python_executable

        def debian() -> None:
            if not self._has("add-apt-repository"):
                self._apt_install("software-properties-common")
            self.runner.run(["add-apt-repository", "-y", self.cfg.deadsnakes_ppa], sudo=True)
            self._apt_updated = False
            self._apt_install(*self.cfg.python_apt_packages)

        return Dependency(
            name=executable,
            probe=lambda: self._has(executable),
            install=select_action(
                self.platform,
                debian=debian,
                macos=lambda: self._brew_install(self.cfg.brew_python_formula),
                what=f"Python {self.cfg.python_version}",
            ),
        )

    def toolchain(self) -> list[Dependency]:
        """Dependencies in install order."""
        return [self.git(), self.node(), self.pm2(), self.python()]
