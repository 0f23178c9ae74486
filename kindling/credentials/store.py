"""
Credential Store.

Persists storage credentials as ``export NAME="value"`` lines in the
user's shell profile and resolves them for the rest of the run. The store
only ever appends: a name already present in the profile is read, never
rewritten, and never written a second time.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping, Protocol

import typer

from ..core.config import CredentialsConfig
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import UserAbortedError

logger = logging.getLogger(LOGGER_NAME)

_EXPORT_RE = re.compile(r"^\s*export\s+([A-Za-z_][A-Za-z0-9_]*)=(.*?)\s*$")
_ESCAPED = ("\\", '"', "$", "`")
_UNESCAPE_RE = re.compile(r"\\([\\\"$`])")


# VALUE QUOTING


def quote_value(value: str) -> str:
    """Double-quote *value* so the shell reads it back verbatim."""
    for ch in _ESCAPED:
        value = value.replace(ch, "\\" + ch)
    return f'"{value}"'


def unquote_value(raw: str) -> str:
    """Inverse of ``quote_value``; single-quoted and bare values are also accepted."""
    if len(raw) >= 2 and raw[0] == raw[-1] == '"':
        return _UNESCAPE_RE.sub(r"\1", raw[1:-1])
    if len(raw) >= 2 and raw[0] == raw[-1] == "'":
        return raw[1:-1]
    return raw


# PROFILE FILE


class ProfileFile:
    """
    Append-only view over a shell profile.

    Attributes:
        path (Path): Profile location (created empty when absent).
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def touch(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)

    def read_exports(self) -> dict[str, str]:
        """Exported names and values; a later line wins as it would in the shell."""
        if not self.path.exists():
            return {}
        exports: dict[str, str] = {}
        for line in self.path.read_text(encoding="utf-8").splitlines():
            match = _EXPORT_RE.match(line)
            if match:
                exports[match.group(1)] = unquote_value(match.group(2))
        return exports

    def append_exports(self, values: Mapping[str, str]) -> None:
        """Append one ``export`` line per entry, keeping the file newline-terminated."""
        if not values:
            return
        self.touch()
        existing = self.path.read_text(encoding="utf-8")
        lines = [f"export {name}={quote_value(value)}" for name, value in values.items()]
        with self.path.open("a", encoding="utf-8") as fh:
            if existing and not existing.endswith("\n"):
                fh.write("\n")
            fh.write("\n".join(lines) + "\n")


# INTERACTIVE INPUT


class Prompter(Protocol):
    """Interactive input capability (replaced by a scripted fake in tests)."""

    def confirm(self, message: str, default: bool = False) -> bool: ...  # pragma: no cover

    def ask(self, message: str, secret: bool = False) -> str: ...  # pragma: no cover


class TyperPrompter:
    """``Prompter`` backed by typer's terminal prompts."""

    def confirm(self, message: str, default: bool = False) -> bool:
        return typer.confirm(message, default=default)

    def ask(self, message: str, secret: bool = False) -> str:
        return typer.prompt(message, hide_input=secret)


# STORE


class CredentialStore:
    """
    Resolves required credentials from the profile, asking only for the
    missing ones.

    Attributes:
        profile (ProfileFile): Persistent backing file.
        prompter (Prompter): Source of interactive answers.
        cfg (CredentialsConfig): Required names, secret names and labels.
    """

    def __init__(
        self,
        cfg: CredentialsConfig,
        prompter: Prompter | None = None,
        profile: ProfileFile | None = None,
    ) -> None:
        self.cfg = cfg
        self.prompter = prompter or TyperPrompter()
        self.profile = profile or ProfileFile(cfg.profile)

    def load_or_collect(self, names: Iterable[str] | None = None) -> dict[str, str]:
        """
        Return a value for every name in *names* (default: ``cfg.required``).

        Raises:
            UserAbortedError: The user declined to store credentials.
        """
        wanted = list(names if names is not None else self.cfg.required)
        LogStyle.step(logger, "Getting AWS credentials ...")

        self.profile.touch()
        stored = self.profile.read_exports()
        # an empty export (BUCKET="") counts as missing
        missing = [name for name in wanted if not stored.get(name)]

        if missing:
            collected = self._collect(missing)
            self.profile.append_exports(collected)
            stored.update(collected)

        LogStyle.done(logger, "Found AWS credentials")
        return {name: stored[name] for name in wanted}

    def _collect(self, missing: list[str]) -> dict[str, str]:
        LogStyle.warn(
            logger, f"This will store your AWS credentials in your {self.profile.path} file."
        )
        LogStyle.warn(logger, "This is not secure and is not recommended.")
        if not self.prompter.confirm("Do you want to proceed?"):
            raise UserAbortedError("Aborted by user.")

        collected: dict[str, str] = {}
        for name in missing:
            value = ""
            while not value:
                value = self.prompter.ask(
                    self.cfg.prompt_for(name), secret=name in self.cfg.secret
                ).strip()
            collected[name] = value
        return collected
