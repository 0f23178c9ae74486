"""
Launch Planner.

Pure mapping from (device, identity, credentials, static config) to a
``LaunchPlan``. Batch size comes from the ordered memory-threshold table in
``LaunchConfig``: the first tier whose threshold the device meets wins,
and the fallback tier covers everything below the lowest threshold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, NamedTuple, Sequence

from ..core.config import BatchTier, LaunchConfig, WalletConfig
from ..core.environment import Device
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import MissingCredentialError, UnknownDeviceMemoryError
from ..identity import Identity, IdentityReport

logger = logging.getLogger(LOGGER_NAME)


def tier_for(memory_mib: int, cfg: LaunchConfig) -> BatchTier:
    """
    Select the batch tier for *memory_mib*.

    Example:
        >>> tier_for(80000, LaunchConfig()).batch_size
        6
        >>> tier_for(79999, LaunchConfig()).name
        'B'
    """
    for tier in cfg.tiers:
        if memory_mib >= tier.min_memory_mib:
            return tier
    return cfg.fallback


@dataclass(frozen=True)
class LaunchPlan:
    """
    Everything needed to start one supervised worker.

    Attributes:
        device_index: GPU index.
        device: Device selector passed to the worker (``cuda:0``).
        batch_size: ``--actual_batch_size`` value.
        tier: Name of the selected tier.
        process_name: Supervisor process name (equals the hotkey name).
        script: Worker entry point.
        interpreter: Python interpreter that runs the script.
        args: Worker arguments, in order.
    """

    device_index: int
    device: str
    batch_size: int
    tier: str
    process_name: str
    script: Path
    interpreter: Path
    args: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "device_index": self.device_index,
            "device": self.device,
            "batch_size": self.batch_size,
            "tier": self.tier,
            "process_name": self.process_name,
            "script": str(self.script),
            "interpreter": str(self.interpreter),
            "args": list(self.args),
        }


class PlanSet(NamedTuple):
    """Plans for every launchable device plus one warning per skipped device."""

    plans: list[LaunchPlan]
    warnings: list[str]


class LaunchPlanner:
    """
    Builds launch plans for a prepared workspace.

    Attributes:
        cfg (LaunchConfig): Tier table and worker arguments.
        wallet (WalletConfig): Wallet name passed to workers.
        script (Path): Absolute worker entry point.
        interpreter (Path): Virtual environment interpreter.
        bucket_variable (str): Credential holding the storage bucket.
    """

    def __init__(
        self,
        cfg: LaunchConfig,
        wallet: WalletConfig,
        script: Path,
        interpreter: Path,
        bucket_variable: str = "BUCKET",
    ) -> None:
        self.cfg = cfg
        self.wallet = wallet
        self.script = script
        self.interpreter = interpreter
        self.bucket_variable = bucket_variable

    def plan(self, device: Device, identity: Identity, credentials: Mapping[str, str]) -> LaunchPlan:
        """
        Plan the worker for *device*.

        Raises:
            UnknownDeviceMemoryError: The device's memory could not be read.
            MissingCredentialError: The bucket credential is missing or empty.
        """
        if device.memory_mib is None:
            raise UnknownDeviceMemoryError(f"Could not get GPU memory for GPU {device.index}")
        bucket = credentials.get(self.bucket_variable)
        if not bucket:
            raise MissingCredentialError(f"Credential {self.bucket_variable} is not set")

        tier = tier_for(device.memory_mib, self.cfg)
        selector = f"{self.cfg.device_prefix}:{device.index}"
        args = [
            "--actual_batch_size",
            str(tier.batch_size),
            "--wallet.name",
            self.wallet.name,
            "--wallet.hotkey",
            identity.name,
            "--bucket",
            bucket,
            "--device",
            selector,
        ]
        if self.cfg.use_wandb:
            args.append("--use_wandb")
        args += ["--project", self.cfg.project]

        return LaunchPlan(
            device_index=device.index,
            device=selector,
            batch_size=tier.batch_size,
            tier=tier.name,
            process_name=identity.name,
            script=self.script,
            interpreter=self.interpreter,
            args=tuple(args),
        )

    def plan_all(
        self,
        devices: Sequence[Device],
        identities: IdentityReport,
        credentials: Mapping[str, str],
    ) -> PlanSet:
        """
        Plan every device that has known memory and a registered identity.

        Skipped devices produce a warning instead of a plan.
        """
        plans: list[LaunchPlan] = []
        warnings: list[str] = []
        for device in devices:
            identity = identities.for_index(device.index)
            if identity is None or not identity.registered:
                msg = f"GPU {device.index} has no registered hotkey, not launching a worker"
                LogStyle.warn(logger, msg)
                warnings.append(msg)
                continue
            try:
                plan = self.plan(device, identity, credentials)
            except UnknownDeviceMemoryError as e:
                LogStyle.warn(logger, str(e))
                warnings.append(str(e))
                continue
            LogStyle.step(
                logger,
                f"Starting miner on GPU {plan.device_index} with batch size {plan.batch_size}...",
            )
            plans.append(plan)
        return PlanSet(plans=plans, warnings=warnings)
