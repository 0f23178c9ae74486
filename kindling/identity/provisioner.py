"""
Identity Provisioner.

Ensures the primary identity (the wallet coldkey) and one device identity
(hotkey) per GPU index, and registers each hotkey on the subnet. Key
creation failures abort the run; a registration failure only drops that
index from launch.
"""

from __future__ import annotations

import logging

from ..core.config import WalletConfig
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import RegistrationError
from .models import Identity, IdentityKind, IdentityReport
from .wallet import KeyStore, RegistryClient

logger = logging.getLogger(LOGGER_NAME)


class IdentityProvisioner:
    """
    Creates missing keys and registers hotkeys.

    Attributes:
        keystore (KeyStore): Local key material.
        registry (RegistryClient): Subnet registry.
        cfg (WalletConfig): Wallet name, hotkey naming and registry target.
    """

    def __init__(self, keystore: KeyStore, registry: RegistryClient, cfg: WalletConfig) -> None:
        self.keystore = keystore
        self.registry = registry
        self.cfg = cfg

    @property
    def namespace(self) -> str:
        return f"{self.cfg.network}/{self.cfg.netuid}"

    def ensure_primary(self) -> Identity:
        """
        Create the coldkey when absent.

        Raises:
            InstallFailedError: Creation failed.
            MissingToolError: The wallet CLI is not installed.
        """
        LogStyle.step(logger, "Creating wallets ...")
        if not self.keystore.coldkey_exists():
            self.keystore.create_coldkey()
        LogStyle.done(logger, f"Attained Wallet({self.cfg.name})")
        return Identity(
            name=self.cfg.name,
            kind=IdentityKind.PRIMARY,
            exists_locally=True,
            namespace=self.namespace,
        )

    def ensure_device(self, index: int, report: IdentityReport) -> Identity:
        """Create hotkey *index* if needed, then register it (non-fatal)."""
        hotkey = self.cfg.hotkey_name(index)
        if not self.keystore.hotkey_exists(hotkey):
            self.keystore.create_hotkey(hotkey)
        LogStyle.done(logger, f"Created Hotkey( {hotkey} )")

        registered = self.registry.is_registered(hotkey, self.cfg.netuid, self.cfg.network)
        if not registered:
            LogStyle.step(logger, f"Registering key on subnet {self.cfg.netuid}")
            try:
                self.registry.register(hotkey, self.cfg.netuid, self.cfg.network)
                registered = True
            except RegistrationError as e:
                LogStyle.warn(logger, str(e))
                report.warnings.append(str(e))

        if registered:
            LogStyle.done(logger, f"Registered Hotkey( {hotkey} )")

        return Identity(
            name=hotkey,
            kind=IdentityKind.DEVICE,
            index=index,
            exists_locally=True,
            registered=registered,
            namespace=self.namespace,
        )

    def ensure_identities(self, count: int) -> IdentityReport:
        """
        Ensure the primary identity and hotkeys ``0..count-1``.

        Args:
            count: Number of GPUs; zero ensures the primary identity only.
        """
        report = IdentityReport(primary=self.ensure_primary())
        if count <= 0:
            LogStyle.warn(logger, "No GPUs found. Skipping hotkey creation.")
            return report

        for index in range(count):
            report.devices.append(self.ensure_device(index, report))

        LogStyle.done(
            logger,
            f"Registered {len(report.registered_indices)}/{count} keys to subnet {self.cfg.netuid}",
        )
        return report
