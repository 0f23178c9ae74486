"""
Host Platform Detection.

Resolves the OS family and, on Linux, the distribution identity from
``/etc/os-release``. Install recipes use this once per dependency to pick a
package manager; anything outside the supported families is reported rather
than silently skipped.
"""

from __future__ import annotations

import platform as _platform
import shlex
from dataclasses import dataclass, field
from pathlib import Path

OS_RELEASE_PATH = Path("/etc/os-release")

_DEBIAN_FAMILY = frozenset({"ubuntu", "debian"})


@dataclass(frozen=True)
class HostPlatform:
    """
    Snapshot of the host OS identity.

    Attributes:
        system: ``platform.system()`` value (``Linux``, ``Darwin``, ...).
        distro_id: ``ID`` from os-release (lowercase, empty when unknown).
        distro_like: ``ID_LIKE`` entries from os-release.
    """

    system: str
    distro_id: str = ""
    distro_like: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_linux(self) -> bool:
        return self.system == "Linux"

    @property
    def is_macos(self) -> bool:
        return self.system == "Darwin"

    @property
    def is_debian_family(self) -> bool:
        """Ubuntu, Debian, or a distribution that declares itself like them."""
        if not self.is_linux:
            return False
        return self.distro_id in _DEBIAN_FAMILY or bool(_DEBIAN_FAMILY & set(self.distro_like))

    @property
    def label(self) -> str:
        """Human-readable description for status lines."""
        if self.is_macos:
            return "macOS"
        if self.is_linux:
            return f"Linux ({self.distro_id or 'unknown distribution'})"
        return self.system or "unknown OS"


def parse_os_release(text: str) -> dict[str, str]:
    """
    Parse os-release ``KEY=value`` lines, honouring shell quoting.

    Args:
        text: Raw file content.

    Returns:
        Mapping of keys to unquoted values; malformed lines are ignored.
    """
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            continue
        values[key.strip()] = parts[0] if parts else ""
    return values


def detect_platform(os_release: Path = OS_RELEASE_PATH) -> HostPlatform:
    """
    Detect the current host platform.

    Args:
        os_release: os-release file to read on Linux.

    Returns:
        HostPlatform; on Linux without a readable os-release the distribution
        fields are empty.
    """
    system = _platform.system()
    if system != "Linux":
        return HostPlatform(system=system)

    try:
        info = parse_os_release(os_release.read_text(encoding="utf-8"))
    except OSError:
        return HostPlatform(system=system)

    return HostPlatform(
        system=system,
        distro_id=info.get("ID", "").lower(),
        distro_like=tuple(info.get("ID_LIKE", "").lower().split()),
    )
