"""
Host Path Authority.

Centralizes where Kindling reads and writes on the host machine: its own
state directory and logs, plus the default locations of the shell profile
and wallet directory owned by external tools.
"""

from .constants import (
    DEFAULT_PROFILE_PATH,
    DEFAULT_WALLET_PATH,
    LOG_DIR,
    LOGGER_NAME,
    RECIPE_ENV_VAR,
    STATE_DIR,
    STATIC_DIRS,
    get_state_dir,
    setup_static_directories,
)

__all__ = [
    "LOGGER_NAME",
    "RECIPE_ENV_VAR",
    "STATE_DIR",
    "LOG_DIR",
    "DEFAULT_PROFILE_PATH",
    "DEFAULT_WALLET_PATH",
    "STATIC_DIRS",
    "get_state_dir",
    "setup_static_directories",
]
