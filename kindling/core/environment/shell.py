"""
External Command Execution.

``CommandRunner`` is the single place where Kindling shells out. It applies
the run-wide output policy (streamed in debug mode, suppressed otherwise),
the optional per-command timeout, the credential environment exported by
the Credential Store, and sudo escalation with the same fallback the host
installers expect:

    * running as root: no sudo
    * ``sudo -n true`` succeeds: prefix with ``sudo``
    * otherwise: warn once and run without sudo
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess  # nosec B404
from pathlib import Path
from typing import Mapping, Sequence

from ..logger import LogStyle
from ..paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class CommandRunner:
    """
    Runs external commands under a shared output and environment policy.

    Attributes:
        verbose (bool): Stream command output to the terminal.
        timeout (float | None): Seconds before a command is killed.
        extra_env (dict[str, str]): Variables layered over ``os.environ``.
    """

    def __init__(
        self,
        verbose: bool = False,
        timeout: float | None = None,
        extra_env: Mapping[str, str] | None = None,
    ) -> None:
        self.verbose = verbose
        self.timeout = timeout
        self.extra_env: dict[str, str] = dict(extra_env or {})
        self._sudo_prefix: list[str] | None = None

    def update_env(self, values: Mapping[str, str]) -> None:
        """Export *values* to every later command."""
        self.extra_env.update(values)

    def which(self, name: str) -> str | None:
        """Absolute path of *name* on PATH, or None."""
        return shutil.which(name)

    def run(
        self,
        cmd: Sequence[str],
        *,
        sudo: bool = False,
        preserve_env: bool = False,
        capture: bool = False,
        input: str | None = None,
        check: bool = True,
        cwd: Path | None = None,
        interactive: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Run *cmd* and return the completed process.

        Args:
            cmd: Argument vector (never passed through a shell).
            sudo: Escalate with sudo when available.
            preserve_env: Pass ``-E`` to sudo.
            capture: Capture stdout/stderr as text instead of applying the
                output policy.
            input: Text written to the command's stdin.
            check: Raise ``CalledProcessError`` on non-zero exit.
            cwd: Working directory.
            interactive: Keep the terminal attached even when output is
                otherwise suppressed (prompts the user must answer).

        Raises:
            subprocess.CalledProcessError: Non-zero exit with ``check=True``.
            subprocess.TimeoutExpired: The configured timeout elapsed.
            FileNotFoundError: The executable does not exist.
        """
        argv = list(cmd)
        if sudo:
            prefix = self._resolve_sudo()
            if prefix and preserve_env:
                prefix = prefix + ["-E"]
            argv = prefix + argv

        logger.debug(f"{LogStyle.STEP} Running: {shlex.join(argv)}")

        if capture:
            stdout = stderr = subprocess.PIPE
        elif self.verbose or interactive:
            stdout = stderr = None
        else:
            stdout = stderr = subprocess.DEVNULL

        return subprocess.run(  # nosec B603
            argv,
            stdout=stdout,
            stderr=stderr,
            input=input,
            text=True,
            check=check,
            cwd=str(cwd) if cwd else None,
            env={**os.environ, **self.extra_env},
            timeout=self.timeout,
        )

    def output(self, cmd: Sequence[str], cwd: Path | None = None) -> str:
        """Run *cmd* and return its stripped stdout; raises on failure."""
        return self.run(cmd, capture=True, cwd=cwd).stdout.strip()

    def succeeds(self, cmd: Sequence[str], cwd: Path | None = None) -> bool:
        """True when *cmd* exits 0; a missing executable counts as failure."""
        try:
            return self.run(cmd, capture=True, check=False, cwd=cwd).returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    def _resolve_sudo(self) -> list[str]:
        """Decide once per run whether commands can be escalated."""
        if self._sudo_prefix is not None:
            return self._sudo_prefix

        if hasattr(os, "geteuid") and os.geteuid() == 0:
            self._sudo_prefix = []
        elif self.which("sudo") is None:
            logger.warning(
                f"{LogStyle.INDENT}{LogStyle.WARNING} sudo command not found. "
                "Running privileged commands without sudo."
            )
            self._sudo_prefix = []
        elif self.succeeds(["sudo", "-n", "true"]):
            self._sudo_prefix = ["sudo"]
        else:
            logger.warning(
                f"{LogStyle.INDENT}{LogStyle.WARNING} Sudo access is required, "
                "attempting to run without sudo."
            )
            self._sudo_prefix = []
        return self._sudo_prefix
