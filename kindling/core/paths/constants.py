"""
Host Path Constants and Static Directory Management.

Single source of truth for where Kindling keeps its own state on the host
(logs, launch manifests, lock files) and where the external collaborators it
drives expect their files (shell profile, wallet directory).

Module Attributes:
    LOGGER_NAME: Global logger identity used by all modules.
    STATE_DIR: Root directory for Kindling state (default: ~/.kindling).
    LOG_DIR: Directory for rotating bootstrap logs.
    DEFAULT_PROFILE_PATH: Shell profile that stores exported credentials.
    DEFAULT_WALLET_PATH: Directory holding wallet coldkeys and hotkeys.
    STATIC_DIRS: Directories that must exist at startup.
"""

import os
from pathlib import Path
from typing import Final, List

# GLOBAL CONSTANTS
# Global logger identity used by all modules to ensure log synchronization
LOGGER_NAME: Final[str] = "Kindling"

# Environment variable pointing to an optional YAML recipe
RECIPE_ENV_VAR: Final[str] = "KINDLING_RECIPE"


# PATH CALCULATIONS
def get_state_dir() -> Path:
    """
    Locate the Kindling state directory.

    Honours the ``KINDLING_HOME`` environment variable so containers and
    tests can redirect state away from the real home directory.

    Returns:
        Absolute Path to the state directory (not created here).
    """
    override = os.getenv("KINDLING_HOME")
    if override:
        return Path(override).expanduser().resolve()
    return (Path.home() / ".kindling").resolve()


STATE_DIR: Final[Path] = get_state_dir()

LOG_DIR: Final[Path] = STATE_DIR / "logs"

DEFAULT_PROFILE_PATH: Final[Path] = Path("~/.bash_profile")

DEFAULT_WALLET_PATH: Final[Path] = Path("~/.bittensor/wallets")

# Directories that must exist at startup
STATIC_DIRS: Final[List[Path]] = [STATE_DIR, LOG_DIR]


# INITIAL SETUP
def setup_static_directories() -> None:
    """
    Ensure Kindling state directories exist at startup.

    Uses mkdir(parents=True, exist_ok=True) so repeated runs are no-ops.
    """
    for directory in STATIC_DIRS:
        directory.mkdir(parents=True, exist_ok=True)
