"""
Launch Manifest.

Declarative schema for worker launches: the script each supervised process
runs, the project label, and the ordered memory-threshold table that maps a
GPU's memory to a batch size.

The default table keeps the historical behaviour where GPUs between 20000
and 40000 MiB and GPUs below 20000 MiB both run with batch size 1: the
lowest threshold tier doubles as the fallback.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import BatchSize, MemoryMiB, ProjectLabel, TierName


class BatchTier(BaseModel):
    """
    One row of the threshold table.

    Attributes:
        name: Tier label used in logs and manifests.
        min_memory_mib: Smallest memory (inclusive) that selects this tier.
        batch_size: ``--actual_batch_size`` passed to the worker.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: TierName
    min_memory_mib: MemoryMiB
    batch_size: BatchSize


DEFAULT_TIERS: tuple[BatchTier, ...] = (
    BatchTier(name="A", min_memory_mib=80000, batch_size=6),
    BatchTier(name="B", min_memory_mib=40000, batch_size=3),
    BatchTier(name="C", min_memory_mib=20000, batch_size=1),
)


class LaunchConfig(BaseModel):
    """
    Worker launch configuration.

    Attributes:
        script: Worker entry point, relative to the repository root.
        project: Project label passed to every worker (``--project``).
        use_wandb: Pass ``--use_wandb`` to workers.
        device_prefix: Device selector prefix (``cuda`` → ``cuda:0``).
        tiers: Threshold table, highest threshold first.
        fallback_tier: Tier used when no threshold matches.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    script: str = "miner.py"
    project: ProjectLabel = "aesop"
    use_wandb: bool = True
    device_prefix: str = Field(default="cuda", min_length=1)
    tiers: tuple[BatchTier, ...] = DEFAULT_TIERS
    fallback_tier: TierName = "C"

    @model_validator(mode="after")
    def check_tier_table(self) -> "LaunchConfig":
        """Thresholds must be strictly descending and the fallback must exist."""
        if not self.tiers:
            raise ValueError("launch.tiers must contain at least one tier")

        thresholds = [t.min_memory_mib for t in self.tiers]
        if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError(
                f"launch.tiers must be ordered by strictly descending min_memory_mib, "
                f"got {thresholds}"
            )

        if self.fallback_tier not in {t.name for t in self.tiers}:
            raise ValueError(f"launch.fallback_tier '{self.fallback_tier}' is not a defined tier")
        return self

    @property
    def fallback(self) -> BatchTier:
        """The tier selected when memory is below every threshold."""
        return next(t for t in self.tiers if t.name == self.fallback_tier)
