"""
Identity Package.

Wallet coldkey and per-GPU hotkey provisioning and subnet registration.
"""

from .models import Identity, IdentityKind, IdentityReport
from .provisioner import IdentityProvisioner
from .wallet import BtcliKeyStore, BtcliRegistryClient, KeyStore, RegistryClient

__all__ = [
    "Identity",
    "IdentityKind",
    "IdentityReport",
    "IdentityProvisioner",
    "KeyStore",
    "RegistryClient",
    "BtcliKeyStore",
    "BtcliRegistryClient",
]
