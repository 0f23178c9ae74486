"""
Wallet & Subnet Manifest.

Identity naming and the subnet registry target. Hotkey names are derived
deterministically from the GPU index, so two devices can never share one.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..paths import DEFAULT_WALLET_PATH
from .types import HotkeyPrefix, MnemonicWords, Netuid, ValidatedPath, WalletName


class WalletConfig(BaseModel):
    """
    Wallet identities and registration target.

    Attributes:
        name: Wallet (coldkey) name shared by every hotkey.
        path: Directory holding wallets on disk.
        hotkey_prefix: Prefix of per-GPU hotkeys (``C`` → ``C0``, ``C1`` ...).
        n_words: Mnemonic length used when creating keys.
        netuid: Subnet the hotkeys are registered on.
        network: Chain endpoint name passed to the registry.
        btcli: Wallet CLI executable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: WalletName = "default"
    path: ValidatedPath = Field(default=DEFAULT_WALLET_PATH)  # type: ignore[assignment]
    hotkey_prefix: HotkeyPrefix = "C"
    n_words: MnemonicWords = 12
    netuid: Netuid = 220
    network: str = Field(default="test", min_length=1)
    btcli: str = "btcli"

    def hotkey_name(self, index: int) -> str:
        """Deterministic hotkey name for GPU *index*."""
        if index < 0:
            raise ValueError(f"device index must be non-negative, got {index}")
        return f"{self.hotkey_prefix}{index}"
