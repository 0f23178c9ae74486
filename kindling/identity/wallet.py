"""
Wallet Adapters.

``KeyStore`` covers local key material and ``RegistryClient`` the subnet
registry. The production adapters drive the ``btcli`` wallet CLI and read
registration state through the worker virtual environment, where the
``bittensor`` package is installed by the worker requirements.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404
from pathlib import Path
from typing import Protocol

from ..core.config import WalletConfig
from ..core.environment import CommandRunner
from ..core.paths import LOGGER_NAME
from ..exceptions import InstallFailedError, MissingToolError, RegistrationError

logger = logging.getLogger(LOGGER_NAME)

# argv: wallet name, hotkey, wallet path, network, netuid
_REGISTERED_SNIPPET = (
    "import sys\n"
    "import bittensor as bt\n"
    "w = bt.wallet(name=sys.argv[1], hotkey=sys.argv[2], path=sys.argv[3])\n"
    "sub = bt.subtensor(sys.argv[4])\n"
    "print(sub.is_hotkey_registered_on_subnet("
    "hotkey_ss58=w.hotkey.ss58_address, netuid=int(sys.argv[5])))\n"
)


# PROTOCOLS


class KeyStore(Protocol):
    """Local key material for one wallet."""

    def coldkey_exists(self) -> bool: ...  # pragma: no cover

    def create_coldkey(self) -> None: ...  # pragma: no cover

    def hotkey_exists(self, hotkey: str) -> bool: ...  # pragma: no cover

    def create_hotkey(self, hotkey: str) -> None: ...  # pragma: no cover


class RegistryClient(Protocol):
    """Subnet registry; ``register`` raises ``RegistrationError`` on failure."""

    def is_registered(self, hotkey: str, netuid: int, network: str) -> bool: ...  # pragma: no cover

    def register(self, hotkey: str, netuid: int, network: str) -> None: ...  # pragma: no cover


# BTCLI ADAPTERS


class BtcliKeyStore:
    """
    ``KeyStore`` over the on-disk wallet layout used by ``btcli``:
    ``<path>/<wallet>/coldkey`` and ``<path>/<wallet>/hotkeys/<hotkey>``.
    """

    def __init__(self, runner: CommandRunner, cfg: WalletConfig) -> None:
        self.runner = runner
        self.cfg = cfg

    @property
    def wallet_dir(self) -> Path:
        return self.cfg.path / self.cfg.name

    def coldkey_exists(self) -> bool:
        return (self.wallet_dir / "coldkey").is_file()

    def hotkey_exists(self, hotkey: str) -> bool:
        return (self.wallet_dir / "hotkeys" / hotkey).is_file()

    def create_coldkey(self) -> None:
        # coldkey creation asks for a password, so the terminal stays attached
        self._btcli(
            ["wallet", "new_coldkey", *self._wallet_args(), "--n-words", str(self.cfg.n_words)],
            what=f"create coldkey for wallet {self.cfg.name}",
            interactive=True,
        )

    def create_hotkey(self, hotkey: str) -> None:
        self._btcli(
            [
                "wallet",
                "new_hotkey",
                *self._wallet_args(),
                "--wallet.hotkey",
                hotkey,
                "--n-words",
                str(self.cfg.n_words),
            ],
            what=f"create hotkey {hotkey}",
            input="n\n",
        )

    def _wallet_args(self) -> list[str]:
        return ["--wallet.path", str(self.cfg.path), "--wallet.name", self.cfg.name]

    def _btcli(self, args: list[str], what: str, **kwargs) -> None:
        if self.runner.which(self.cfg.btcli) is None:
            raise MissingToolError(
                f"{self.cfg.btcli} command not found. Please ensure it is installed."
            )
        try:
            self.runner.run([self.cfg.btcli, *args], **kwargs)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise InstallFailedError(f"Failed to {what}: {e}") from e


class BtcliRegistryClient:
    """
    ``RegistryClient`` that queries through *python* (an interpreter with
    ``bittensor`` installed) and registers with ``btcli subnet pow_register``.
    """

    def __init__(self, runner: CommandRunner, cfg: WalletConfig, python: str | Path) -> None:
        self.runner = runner
        self.cfg = cfg
        self.python = str(python)

    def is_registered(self, hotkey: str, netuid: int, network: str) -> bool:
        """
        True only when the registry positively reports the hotkey.

        An unreachable registry reads as unregistered so that registration
        is attempted, which is itself idempotent on the chain side.
        """
        cmd = [
            self.python,
            "-c",
            _REGISTERED_SNIPPET,
            self.cfg.name,
            hotkey,
            str(self.cfg.path),
            network,
            str(netuid),
        ]
        try:
            out = self.runner.run(cmd, capture=True, check=False).stdout or ""
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.debug(f"Registration query for {hotkey} failed: {e}")
            return False
        return "True" in out

    def register(self, hotkey: str, netuid: int, network: str) -> None:
        cmd = [
            self.cfg.btcli,
            "subnet",
            "pow_register",
            "--wallet.path",
            str(self.cfg.path),
            "--wallet.name",
            self.cfg.name,
            "--wallet.hotkey",
            hotkey,
            "--netuid",
            str(netuid),
            "--subtensor.network",
            network,
            "--no_prompt",
        ]
        try:
            self.runner.run(cmd)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise RegistrationError(f"Failed to register {hotkey} on netuid {netuid}: {e}") from e
