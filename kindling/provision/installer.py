"""
Idempotent Installer.

Ensures a single ``Dependency``: probe first, install only when the probe
fails, then probe again. Nothing is retried and nothing is rolled back;
the caller decides what a FAILED result means for the run.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404

from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import KindlingError
from .results import Dependency, StepResult

logger = logging.getLogger(LOGGER_NAME)


class IdempotentInstaller:
    """Runs probe → install → re-probe for one dependency at a time."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def ensure(self, dep: Dependency) -> StepResult:
        """
        Make *dep* present.

        Returns:
            ALREADY_SATISFIED without side effects when the probe passes,
            INSTALLED when the action succeeded and the re-probe passes,
            FAILED otherwise.
        """
        if dep.probe():
            LogStyle.done(self._log, f"{dep.name} is already installed.")
            return StepResult.satisfied(dep.name)

        LogStyle.step(self._log, f"Installing {dep.name} ...")
        try:
            dep.install()
        except subprocess.CalledProcessError as e:
            return self._failed(dep.name, f"command exited with status {e.returncode}", e)
        except subprocess.TimeoutExpired as e:
            return self._failed(dep.name, f"command timed out after {e.timeout}s", e)
        except FileNotFoundError as e:
            return self._failed(dep.name, f"executable not found: {e.filename}", e)
        except OSError as e:
            return self._failed(dep.name, f"could not run install command: {e}", e)
        except KindlingError as e:
            return self._failed(dep.name, str(e), e)

        if not dep.probe():
            return self._failed(dep.name, "installed but still not detected")

        LogStyle.done(self._log, f"{dep.name} installed.")
        return StepResult.installed(dep.name)

    def _failed(self, name: str, reason: str, error: BaseException | None = None) -> StepResult:
        self._log.error(f"{LogStyle.INDENT}{LogStyle.FAILURE} Failed to install {name}: {reason}")
        return StepResult.failed(name, reason, error)
