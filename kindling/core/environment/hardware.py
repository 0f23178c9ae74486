"""
Hardware Inventory.

Discovers GPU accelerators and their memory capacity through a narrow
``DeviceQuery`` capability. The production adapter shells out to
``nvidia-smi``; tests substitute an in-memory fake.

The inventory never fails: a missing or broken query tool yields zero
devices (warning), and a device whose memory field is not numeric is kept
with unknown memory (warning) so that device indices stay aligned with the
tool's enumeration order. Launch planning excludes such devices.
"""

from __future__ import annotations

import csv
import io
import logging
import subprocess  # nosec B404
from dataclasses import dataclass
from typing import Protocol

import psutil

from ...exceptions import MissingToolError
from ..logger import LogStyle
from ..paths import LOGGER_NAME
from .shell import CommandRunner

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class Device:
    """
    One GPU as reported by the query tool.

    Attributes:
        index: Position in the tool's enumeration (0..N-1).
        memory_mib: Total memory in MiB, or None when unparseable.
        name: Marketing name, informational only.
    """

    index: int
    memory_mib: int | None
    name: str = ""

    @property
    def memory_known(self) -> bool:
        return self.memory_mib is not None

    @property
    def memory_gb(self) -> int | None:
        """Memory in whole GiB, as shown in status lines."""
        return None if self.memory_mib is None else self.memory_mib // 1024


class DeviceQuery(Protocol):
    """
    Capability interface over the GPU query tool.

    ``rows()`` returns one ``(name, memory)`` pair of raw strings per device
    in native enumeration order, and raises ``MissingToolError`` when the
    tool is not installed.
    """

    def rows(self) -> list[tuple[str, str]]: ...  # pragma: no cover


class NvidiaSmiQuery:
    """``DeviceQuery`` adapter backed by ``nvidia-smi``."""

    QUERY_ARGS = ("--query-gpu=name,memory.total", "--format=csv,noheader,nounits")

    def __init__(self, runner: CommandRunner, tool: str = "nvidia-smi") -> None:
        self.runner = runner
        self.tool = tool

    def rows(self) -> list[tuple[str, str]]:
        if self.runner.which(self.tool) is None:
            raise MissingToolError(
                f"{self.tool} command not found. Please ensure NVIDIA drivers are installed."
            )

        text = self.runner.output([self.tool, *self.QUERY_ARGS])
        return parse_query_csv(text)


def parse_query_csv(text: str) -> list[tuple[str, str]]:
    """
    Split ``name, memory`` CSV output into raw field pairs.

    Blank lines are dropped; a row missing the memory column yields an
    empty memory field.
    """
    pairs: list[tuple[str, str]] = []
    for row in csv.reader(io.StringIO(text), skipinitialspace=True):
        if not row or not any(cell.strip() for cell in row):
            continue
        name = row[0].strip()
        memory = row[1].strip() if len(row) > 1 else ""
        pairs.append((name, memory))
    return pairs


def parse_memory_mib(raw: str) -> int | None:
    """
    Parse a memory field into MiB.

    Accepts plain integers and an optional trailing ``MiB`` unit; returns
    None for anything else (``[N/A]``, empty, negative).
    """
    value = raw.strip()
    if value.lower().endswith("mib"):
        value = value[:-3].strip()
    if not value.isdigit():
        return None
    return int(value)


class HardwareInventory:
    """
    Enumerates GPUs via a ``DeviceQuery``.

    Attributes:
        query (DeviceQuery): Capability used to list devices.
    """

    def __init__(self, query: DeviceQuery, log: logging.Logger | None = None) -> None:
        self.query = query
        self._log = log or logger

    def enumerate_devices(self) -> list[Device]:
        """
        Return devices in native order with indices 0..N-1.

        Never raises: tool absence or failure results in an empty list.
        """
        try:
            rows = self.query.rows()
        except MissingToolError as e:
            LogStyle.warn(self._log, str(e))
            return []
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            LogStyle.warn(self._log, f"GPU query failed, assuming no GPUs: {e}")
            return []

        devices: list[Device] = []
        for index, (name, raw_memory) in enumerate(rows):
            memory = parse_memory_mib(raw_memory)
            device = Device(index=index, memory_mib=memory, name=name)
            if memory is None:
                LogStyle.warn(
                    self._log, f"Could not get GPU memory for GPU {index} (got {raw_memory!r})"
                )
            else:
                LogStyle.done(self._log, f" - Found GPU {index} ({name}) with {device.memory_gb} GB")
            devices.append(device)

        if not devices:
            LogStyle.warn(self._log, "No GPUs found on this machine.")
        return devices


def system_memory_gb() -> float | None:
    """Total host RAM in GiB, or None when it cannot be read."""
    try:
        return psutil.virtual_memory().total / (1024**3)
    except (OSError, RuntimeError) as e:
        logger.warning(f"{LogStyle.INDENT}{LogStyle.WARNING} Cannot determine system RAM: {e}")
        return None
