"""
Semantic type Definitions & Validation Primitives.

Foundational type-system for the configuration engine. Uses Pydantic's
Annotated types to enforce domain constraints (subnet ids, environment
variable names, memory thresholds, path expansion) before values reach the
provisioning logic.

Core Responsibilities:
    * Path sanitization: expands ``~`` and resolves to absolute form without
      touching the disk
    * Boundary enforcement: batch sizes, thresholds and timeouts
    * type aliasing: a central registry of domain types (Netuid, EnvVarName,
      HotkeyPrefix) shared by every config section
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import AfterValidator, Field, PlainSerializer


# VALIDATORS
def _sanitize_path(v: str | Path) -> Path:
    """
    Resolve path to absolute form without disk side-effects.

    Args:
        v: Path object or string to sanitize

    Returns:
        Absolute Path with home directory expanded
    """
    return Path(v).expanduser().resolve()


# GENERIC PRIMITIVES
PositiveInt = Annotated[int, Field(gt=0)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveFloat = Annotated[float, Field(gt=0.0)]

# FILESYSTEM
ValidatedPath = Annotated[
    Path,
    AfterValidator(_sanitize_path),
    PlainSerializer(lambda v: str(v), when_used="json", return_type=str),
]

# CREDENTIALS
EnvVarName = Annotated[str, Field(pattern=r"^[A-Z_][A-Z0-9_]*$")]

# WALLETS & SUBNET
Netuid = Annotated[int, Field(ge=0, le=65535)]
HotkeyPrefix = Annotated[str, Field(pattern=r"^[A-Za-z][A-Za-z0-9_-]*$", max_length=16)]
WalletName = Annotated[str, Field(pattern=r"^[A-Za-z0-9_-]+$", min_length=1, max_length=64)]
MnemonicWords = Literal[12, 15, 18, 21, 24]

# LAUNCH
BatchSize = Annotated[int, Field(ge=1, le=1024)]
MemoryMiB = Annotated[int, Field(ge=0)]
TierName = Annotated[str, Field(pattern=r"^[A-Za-z0-9_]+$", min_length=1)]
ProjectLabel = Annotated[str, Field(min_length=1, max_length=128)]

# SYSTEM & METADATA
PythonVersion = Annotated[str, Field(pattern=r"^3\.\d{1,2}$")]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
