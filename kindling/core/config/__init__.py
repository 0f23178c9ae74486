"""
Configuration Package Initialization.

Provides a flat public API for configuration components. Section modules are
imported lazily (PEP 562) so that importing ``kindling.core.config`` stays
cheap for callers that only need one section.

Example:
    >>> from kindling.core.config import Config, LaunchConfig
    >>> cfg = Config.from_cli(debug=False, project="aesop")
"""

from importlib import import_module
from typing import Any

__all__ = [
    "Config",
    "ProvisionConfig",
    "CredentialsConfig",
    "WalletConfig",
    "LaunchConfig",
    "BatchTier",
    "DEFAULT_TIERS",
    "ServicesConfig",
    "InteractiveConfig",
    "TelemetryConfig",
    "HardwareConfig",
    "ValidatedPath",
]

# LAZY IMPORTS MAPPING
_PKG = "kindling.core.config"
_LAUNCH_MOD = f"{_PKG}.launch_config"
_RUNTIME_MOD = f"{_PKG}.runtime_config"

_LAZY_IMPORTS: dict[str, str] = {
    "Config": f"{_PKG}.manifest",
    "ProvisionConfig": f"{_PKG}.provision_config",
    "CredentialsConfig": f"{_PKG}.credentials_config",
    "WalletConfig": f"{_PKG}.wallet_config",
    "LaunchConfig": _LAUNCH_MOD,
    "BatchTier": _LAUNCH_MOD,
    "DEFAULT_TIERS": _LAUNCH_MOD,
    "ServicesConfig": _RUNTIME_MOD,
    "InteractiveConfig": _RUNTIME_MOD,
    "TelemetryConfig": _RUNTIME_MOD,
    "HardwareConfig": _RUNTIME_MOD,
    "ValidatedPath": f"{_PKG}.types",
}


def __getattr__(name: str) -> Any:
    """
    Lazily import configuration components on first access.

    Args:
        name: Name of the configuration class to import.

    Returns:
        The requested configuration class.

    Raises:
        AttributeError: If name is not in the public API (__all__).
    """
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(_LAZY_IMPORTS[name])
    attr = getattr(module, name)

    # Cache on module for future access
    globals()[name] = attr
    return attr


def __dir__() -> list[str]:
    """Support for dir() and IDE auto-completion."""
    return sorted(__all__)
