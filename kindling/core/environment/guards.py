"""
Process Guarding Utilities.

Provides an exclusive filesystem lock (``flock``) so that two bootstrap runs
on the same host never interleave: both would otherwise race on the shell
profile, the wallet directory and the pm2 process table.
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path
from typing import IO

# Tentative import for Unix-specific file locking
try:
    import fcntl

    HAS_FCNTL = True
except ImportError:  # pragma: no cover
    HAS_FCNTL = False

from ..logger import LogStyle

# Global State
# Persistent file descriptor to prevent garbage collection from releasing locks
_lock_fd: IO | None = None


def ensure_single_instance(lock_file: Path, logger: logging.Logger) -> None:
    """
    Implements a cooperative advisory lock to guarantee singleton execution.

    If the lock cannot be acquired immediately another bootstrap is active,
    and the process aborts.

    Args:
        lock_file (Path): Filesystem path where the lock sentinel will reside.
        logger (logging.Logger): Active logger for reporting acquisition status.

    Raises:
        SystemExit: If an existing lock is detected on the system.
    """
    global _lock_fd

    # Locking is only supported on Unix-like systems via fcntl
    if platform.system() in ("Linux", "Darwin") and HAS_FCNTL:
        f: IO | None = None
        try:
            lock_file.parent.mkdir(parents=True, exist_ok=True)
            f = open(lock_file, "a")

            fcntl.flock(f, fcntl.LOCK_EX | fcntl.LOCK_NB)
            _lock_fd = f
            logger.debug(f"{LogStyle.INDENT}{LogStyle.ARROW} Bootstrap lock acquired: {lock_file}")

        except (IOError, BlockingIOError):
            if f is not None:
                f.close()
            logger.error(
                f"{LogStyle.WARNING} Another bootstrap is already running on this host. Aborting."
            )
            sys.exit(1)


def release_single_instance(lock_file: Path) -> None:
    """
    Safely releases the lock and unlinks the sentinel file.

    Args:
        lock_file (Path): Filesystem path to the sentinel file to be removed.
    """
    global _lock_fd

    if _lock_fd:
        try:
            if HAS_FCNTL:
                try:
                    fcntl.flock(_lock_fd, fcntl.LOCK_UN)
                except OSError:
                    # Unlock may fail if the descriptor is already invalid
                    pass
            try:
                _lock_fd.close()
            except OSError:  # pragma: no cover
                pass
        finally:
            _lock_fd = None

    # Unlink directly instead of exists() + unlink() (TOCTOU)
    try:
        lock_file.unlink()
    except FileNotFoundError:
        pass
    except OSError:  # pragma: no cover
        pass
