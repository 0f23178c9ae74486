"""
Pipeline Duration Tracking.

Wall-clock timer used by the orchestrator to report how long a bootstrap
run took.
"""

from __future__ import annotations

import time
from typing import Protocol


class TimeTrackerProtocol(Protocol):
    """Structural contract for pipeline timers."""

    def start(self) -> None: ...  # pragma: no cover

    def stop(self) -> float: ...  # pragma: no cover

    @property
    def elapsed_seconds(self) -> float: ...  # pragma: no cover

    @property
    def elapsed_formatted(self) -> str: ...  # pragma: no cover


class TimeTracker:
    """Monotonic wall-clock timer."""

    def __init__(self) -> None:
        self._start: float | None = None
        self._end: float | None = None

    def start(self) -> None:
        self._start = time.monotonic()
        self._end = None

    def stop(self) -> float:
        """Stop the timer and return the elapsed seconds (0.0 if never started)."""
        if self._start is None:
            return 0.0
        self._end = time.monotonic()
        return self.elapsed_seconds

    @property
    def elapsed_seconds(self) -> float:
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.monotonic()
        return end - self._start

    @property
    def elapsed_formatted(self) -> str:
        """Elapsed time as ``1h 02m 03s``, ``2m 03s`` or ``4.1s``."""
        total = self.elapsed_seconds
        hours, rem = divmod(int(total), 3600)
        minutes, seconds = divmod(rem, 60)
        if hours:
            return f"{hours}h {minutes:02d}m {seconds:02d}s"
        if minutes:
            return f"{minutes}m {seconds:02d}s"
        return f"{total:.1f}s"
