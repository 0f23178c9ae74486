"""
Environment & Host Abstraction Layer.

Centralizes everything Kindling learns about, or does to, the host outside
of the pipeline stages themselves: OS detection, external command
execution, GPU discovery, the single-instance lock and run timing.
"""

from .guards import ensure_single_instance, release_single_instance
from .hardware import (
    Device,
    DeviceQuery,
    HardwareInventory,
    NvidiaSmiQuery,
    parse_memory_mib,
    system_memory_gb,
)
from .platform import HostPlatform, detect_platform, parse_os_release
from .shell import CommandRunner
from .timing import TimeTracker, TimeTrackerProtocol

__all__ = [
    # Platform
    "HostPlatform",
    "detect_platform",
    "parse_os_release",
    # Commands
    "CommandRunner",
    # Hardware
    "Device",
    "DeviceQuery",
    "HardwareInventory",
    "NvidiaSmiQuery",
    "parse_memory_mib",
    "system_memory_gb",
    # Guards
    "ensure_single_instance",
    "release_single_instance",
    # Timing
    "TimeTracker",
    "TimeTrackerProtocol",
]
