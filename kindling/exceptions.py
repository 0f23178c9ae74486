"""
Kindling Exception Hierarchy.

KindlingError (base, Exception)
├── UnsupportedPlatformError(KindlingError)   ← unknown OS / distribution
├── MissingToolError(KindlingError)           ← required executable absent
├── InstallFailedError(KindlingError)         ← installer or setup step failed
├── UserAbortedError(KindlingError)           ← user declined a confirmation gate
├── MissingCredentialError(KindlingError)     ← required credential absent or empty
├── RegistrationError(KindlingError)          ← per-hotkey registration (non-fatal)
└── UnknownDeviceMemoryError(KindlingError)   ← unparseable GPU memory (non-fatal)

The first five abort the bootstrap run. The last two are caught per index
by the identity provisioner and the launch planner, reported as warnings,
and only drop the affected device index.
"""


class KindlingError(Exception):
    """Base exception for all Kindling errors."""


class UnsupportedPlatformError(KindlingError):
    """Host OS or Linux distribution has no install recipe."""


class MissingToolError(KindlingError):
    """A required command-line tool is not available on PATH."""


class InstallFailedError(KindlingError):
    """An install action or provisioning command exited unsuccessfully."""


class UserAbortedError(KindlingError):
    """The user answered 'no' at an interactive gate."""


class MissingCredentialError(KindlingError):
    """A credential needed for launch is absent or empty."""


class RegistrationError(KindlingError):
    """Registering a hotkey on the subnet failed."""


class UnknownDeviceMemoryError(KindlingError):
    """GPU memory could not be parsed; the device is not planned."""
