"""
Credentials Manifest.

Names and prompt labels of the storage secrets Kindling persists in the
user's shell profile.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..paths import DEFAULT_PROFILE_PATH
from .types import EnvVarName, ValidatedPath

_DEFAULT_PROMPTS: dict[str, str] = {
    "AWS_ACCESS_KEY_ID": "Enter your AWS Access Key ID",
    "AWS_SECRET_ACCESS_KEY": "Enter your AWS Secret Access Key",
    "BUCKET": "Enter your S3 Bucket Name",
}


class CredentialsConfig(BaseModel):
    """
    Persisted credential policy.

    Attributes:
        profile_path: Shell profile that receives ``export NAME="value"`` lines.
        required: Variable names that must be resolved before launch.
        secret: Names whose prompt hides the typed input.
        bucket_variable: Name holding the storage bucket passed to workers.
        prompts: Prompt label per variable name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    profile_path: ValidatedPath = Field(default=DEFAULT_PROFILE_PATH)  # type: ignore[assignment]
    required: tuple[EnvVarName, ...] = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "BUCKET")
    secret: tuple[EnvVarName, ...] = ("AWS_SECRET_ACCESS_KEY",)
    bucket_variable: EnvVarName = "BUCKET"
    prompts: dict[str, str] = Field(default_factory=lambda: dict(_DEFAULT_PROMPTS))

    @model_validator(mode="after")
    def check_bucket_required(self) -> "CredentialsConfig":
        """The bucket variable is passed to every worker, so it must be collected."""
        if self.bucket_variable not in self.required:
            raise ValueError(
                f"bucket_variable '{self.bucket_variable}' must be listed in 'required'"
            )
        return self

    def prompt_for(self, name: str) -> str:
        """Prompt label for *name*, falling back to a generic label."""
        return self.prompts.get(name, f"Enter {name}")

    @property
    def profile(self) -> Path:
        """Absolute path of the shell profile."""
        return self.profile_path
