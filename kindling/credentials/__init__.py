"""
Credentials Package.

Shell-profile backed persistence of storage credentials.
"""

from .store import CredentialStore, ProfileFile, Prompter, TyperPrompter, quote_value, unquote_value

__all__ = [
    "CredentialStore",
    "ProfileFile",
    "Prompter",
    "TyperPrompter",
    "quote_value",
    "unquote_value",
]
