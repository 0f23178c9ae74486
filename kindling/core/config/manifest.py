"""
Root Configuration Manifest.

Aggregates every section into a single frozen ``Config`` (Single Source of
Truth) and provides the factories used by the CLI:

    * ``Config.from_recipe``: YAML recipe plus dotted overrides
    * ``Config.from_cli``: built-in defaults (or ``$KINDLING_RECIPE``) plus the
      two positional CLI arguments
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...exceptions import KindlingError
from ..io import load_config_from_yaml
from ..paths import RECIPE_ENV_VAR
from .credentials_config import CredentialsConfig
from .launch_config import LaunchConfig
from .provision_config import ProvisionConfig
from .runtime_config import HardwareConfig, InteractiveConfig, ServicesConfig, TelemetryConfig
from .wallet_config import WalletConfig


class Config(BaseModel):
    """
    Complete bootstrap configuration.

    Attributes:
        provision: Host toolchain and workspace.
        credentials: Persisted storage secrets.
        wallet: Identity naming and registry target.
        launch: Worker launch and batch-size tiers.
        services: Optional wandb login and bucket cleaning.
        interactive: Confirmation gates.
        telemetry: Logging and state directories.
        hardware: GPU query tool and host lock.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provision: ProvisionConfig = Field(default_factory=ProvisionConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    wallet: WalletConfig = Field(default_factory=WalletConfig)
    launch: LaunchConfig = Field(default_factory=LaunchConfig)
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    interactive: InteractiveConfig = Field(default_factory=InteractiveConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    hardware: HardwareConfig = Field(default_factory=HardwareConfig)

    @classmethod
    def from_recipe(cls, recipe: Path, overrides: dict[str, Any] | None = None) -> "Config":
        """
        Build a Config from a YAML recipe.

        Args:
            recipe: Path to the YAML recipe.
            overrides: Flat mapping of dotted keys (``launch.project``) to values,
                applied on top of the recipe before validation.

        Returns:
            Validated, frozen Config.
        """
        data = load_config_from_yaml(recipe)
        return cls.model_validate(_apply_overrides(data, overrides or {}))

    @classmethod
    def from_cli(
        cls,
        debug: bool | None = None,
        project: str | None = None,
        recipe: Path | None = None,
    ) -> "Config":
        """
        Build the Config for a CLI invocation.

        The recipe is taken from *recipe*, else from ``$KINDLING_RECIPE``, else
        built-in defaults are used. Positional CLI arguments that were given win;
        None leaves the recipe value or the section default in place.

        Args:
            debug: Stream external command output and log at DEBUG level, or None.
            project: Project label passed to every worker, or None.
            recipe: Optional explicit recipe path.

        Returns:
            Validated, frozen Config.
        """
        overrides: dict[str, Any] = {}
        if debug is not None:
            overrides["telemetry.debug"] = debug
        if project is not None:
            overrides["launch.project"] = project

        if recipe is None and os.getenv(RECIPE_ENV_VAR):
            recipe = Path(os.environ[RECIPE_ENV_VAR]).expanduser()

        if recipe is not None:
            return cls.from_recipe(recipe, overrides=overrides)
        return cls.model_validate(_apply_overrides({}, overrides))


def _apply_overrides(data: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Apply dotted-key overrides to a nested mapping without mutating the input.

    Args:
        data: Raw configuration mapping.
        overrides: ``{"section.field": value}`` pairs.

    Returns:
        New mapping with overrides applied.

    Raises:
        KindlingError: If an override path crosses a non-mapping value.
    """
    out = copy.deepcopy(data)
    for dotted, value in overrides.items():
        *parents, leaf = dotted.split(".")
        cur = out
        for part in parents:
            node = cur.get(part)
            if node is None:
                node = cur[part] = {}
            elif not isinstance(node, dict):
                raise KindlingError(f"Cannot override '{dotted}': '{part}' is not a section")
            cur = node
        cur[leaf] = value
    return out
