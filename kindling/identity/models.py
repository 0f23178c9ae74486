"""Identity data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class IdentityKind(str, Enum):
    PRIMARY = "primary"
    DEVICE = "device"


@dataclass(frozen=True)
class Identity:
    """
    A wallet key known to the host.

    Attributes:
        name: Coldkey wallet name (PRIMARY) or hotkey name (DEVICE).
        kind: PRIMARY for the coldkey, DEVICE for a per-GPU hotkey.
        index: GPU index for DEVICE identities, None for PRIMARY.
        exists_locally: Key material is on disk.
        registered: Registered on the subnet (always False for PRIMARY).
        namespace: Registry scope, ``<network>/<netuid>``.
    """

    name: str
    kind: IdentityKind
    index: int | None = None
    exists_locally: bool = False
    registered: bool = False
    namespace: str = ""


@dataclass
class IdentityReport:
    """Ordered identities produced by one provisioning pass plus its warnings."""

    primary: Identity
    devices: list[Identity] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def registered_indices(self) -> list[int]:
        return [i.index for i in self.devices if i.registered and i.index is not None]

    def for_index(self, index: int) -> Identity | None:
        return next((i for i in self.devices if i.index == index), None)
