"""
Provisioning Manifest.

Declarative schema for the host toolchain and worker workspace: which
repository is cloned, which Python runtime is pinned, where installers are
fetched from and which extra packages are forced into the virtual
environment.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .types import PositiveFloat, PythonVersion


class ProvisionConfig(BaseModel):
    """
    Host toolchain and workspace configuration.

    Attributes:
        repo_url: Git URL of the worker codebase.
        repo_dir: Directory name used when cloning next to the current directory.
        requirements_file: Requirements file inside the repository.
        venv_dir: Virtual environment directory inside the repository.
        python_version: Pinned interpreter version (``python3.12`` on PATH).
        python_apt_packages: Packages installed from the deadsnakes PPA.
        extra_pip_packages: Packages force-upgraded after the requirements.
        command_timeout: Per-command timeout in seconds (None blocks forever).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    repo_url: str = Field(default="https://github.com/unconst/boltzmann")
    repo_dir: str = Field(default="boltzmann", min_length=1)
    requirements_file: str = "requirements.txt"
    venv_dir: str = "venv"

    python_version: PythonVersion = "3.12"
    python_apt_packages: tuple[str, ...] = ("python3.12", "python3.12-venv")
    deadsnakes_ppa: str = "ppa:deadsnakes/ppa"

    nodesource_url: str = "https://deb.nodesource.com/setup_20.x"
    homebrew_install_url: str = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

    extra_pip_packages: tuple[str, ...] = ("cryptography", "pyOpenSSL")
    command_timeout: PositiveFloat | None = Field(
        default=None, description="Seconds before an external command is killed"
    )

    @property
    def python_executable(self) -> str:
        """Executable name of the pinned interpreter (e.g. ``python3.12``)."""
        return f"python{self.python_version}"

    @property
    def brew_python_formula(self) -> str:
        """Homebrew formula for the pinned interpreter (e.g. ``python@3.12``)."""
        return f"python@{self.python_version}"
