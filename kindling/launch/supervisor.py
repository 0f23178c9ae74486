"""
Process Supervisor Bridge.

Replaces the previous generation of supervised workers with the current
launch plans. Whenever anything is running the whole table is deleted
before starting, so a re-run never leaves two generations alive.
"""

from __future__ import annotations

import json
import logging
import subprocess  # nosec B404
from dataclasses import dataclass
from typing import Protocol, Sequence

from ..core.environment import CommandRunner
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import InstallFailedError, KindlingError, MissingToolError
from .planner import LaunchPlan

logger = logging.getLogger(LOGGER_NAME)

RUNNING = "running"
STOPPED = "stopped"


@dataclass(frozen=True)
class SupervisedProcess:
    name: str
    status: str = STOPPED

    @property
    def running(self) -> bool:
        return self.status == RUNNING


class ProcessSupervisor(Protocol):
    """Process manager capability."""

    def list_processes(self) -> list[SupervisedProcess]: ...  # pragma: no cover

    def delete_all(self) -> None: ...  # pragma: no cover

    def start(self, plan: LaunchPlan) -> None: ...  # pragma: no cover


class Pm2Supervisor:
    """``ProcessSupervisor`` backed by the pm2 CLI."""

    def __init__(self, runner: CommandRunner, pm2: str = "pm2") -> None:
        self.runner = runner
        self.pm2 = pm2

    def list_processes(self) -> list[SupervisedProcess]:
        try:
            out = self.runner.output([self.pm2, "jlist"])
        except FileNotFoundError as e:
            raise MissingToolError(f"{self.pm2} command not found") from e
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise InstallFailedError(f"Failed to list {self.pm2} processes: {e}") from e
        return parse_jlist(out)

    def delete_all(self) -> None:
        self._run([self.pm2, "delete", "all"], "stop old processes")

    def start(self, plan: LaunchPlan) -> None:
        self._run(
            [
                self.pm2,
                "start",
                str(plan.script),
                "--interpreter",
                str(plan.interpreter),
                "--name",
                plan.process_name,
                "--",
                *plan.args,
            ],
            f"start {plan.process_name}",
        )

    def _run(self, cmd: list[str], what: str) -> None:
        try:
            self.runner.run(cmd)
        except FileNotFoundError as e:
            raise MissingToolError(f"{self.pm2} command not found") from e
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise InstallFailedError(f"Failed to {what}: {e}") from e


def parse_jlist(text: str) -> list[SupervisedProcess]:
    """
    Parse ``pm2 jlist`` output.

    pm2 may print banner lines before the JSON array; everything before the
    first ``[`` is ignored. Only the ``online`` status counts as running.
    """
    start = text.find("[")
    if start < 0:
        return []
    try:
        entries = json.loads(text[start:])
    except json.JSONDecodeError as e:
        raise InstallFailedError(f"Unreadable pm2 process list: {e}") from e

    processes = []
    for entry in entries:
        status = entry.get("pm2_env", {}).get("status", "")
        processes.append(
            SupervisedProcess(
                name=str(entry.get("name", "")),
                status=RUNNING if status == "online" else STOPPED,
            )
        )
    return processes


class SupervisorBridge:
    """Drives a ``ProcessSupervisor`` from launch plans."""

    def __init__(self, supervisor: ProcessSupervisor) -> None:
        self.supervisor = supervisor

    def restart_all(self, plans: Sequence[LaunchPlan]) -> list[SupervisedProcess]:
        """
        Delete every supervised process if any is running, then start one
        process per plan.

        Returns:
            The process table after starting, or an empty list when it
            cannot be read once the workers are up.
        """
        if any(p.running for p in self.supervisor.list_processes()):
            LogStyle.step(logger, "Stopping old pm2 processes...")
            self.supervisor.delete_all()
            LogStyle.done(logger, "Stopped old processes")

        for plan in plans:
            self.supervisor.start(plan)
        LogStyle.done(logger, "Started miners")

        try:
            table = self.supervisor.list_processes()
        except KindlingError as e:
            LogStyle.warn(logger, f"Could not read the pm2 process table: {e}")
            return []
        for proc in table:
            logger.info(f"{LogStyle.INDENT}{LogStyle.BULLET} {proc.name:<8} {proc.status}")
        return table
