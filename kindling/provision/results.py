"""
Step Result Model.

Typed outcome of ensuring one dependency. A step ends in exactly one of
three states; only FAILED carries a reason and, when available, the
underlying exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class StepStatus(str, Enum):
    """Terminal state of one ``ensure`` invocation."""

    ALREADY_SATISFIED = "already_satisfied"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of ensuring a single dependency.

    Attributes:
        name: Dependency name.
        status: Terminal state.
        reason: Human-readable failure reason (FAILED only).
        error: Exception that caused the failure, if any.
    """

    name: str
    status: StepStatus
    reason: str = ""
    error: BaseException | None = None

    @classmethod
    def satisfied(cls, name: str) -> "StepResult":
        return cls(name=name, status=StepStatus.ALREADY_SATISFIED)

    @classmethod
    def installed(cls, name: str) -> "StepResult":
        return cls(name=name, status=StepStatus.INSTALLED)

    @classmethod
    def failed(cls, name: str, reason: str, error: BaseException | None = None) -> "StepResult":
        return cls(name=name, status=StepStatus.FAILED, reason=reason, error=error)

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.FAILED


@dataclass(frozen=True)
class Dependency:
    """
    An installable capability.

    Attributes:
        name: Display name (``git``, ``pm2`` ...).
        probe: Side-effect-free check; True when the dependency is present.
        install: Action that installs the dependency. It signals failure by
            raising (``CalledProcessError``, ``FileNotFoundError``,
            ``KindlingError``) and returns normally on success.
    """

    name: str
    probe: Callable[[], bool]
    install: Callable[[], None]
