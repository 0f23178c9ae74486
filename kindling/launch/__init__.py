"""
Launch Package.

Batch-size planning per GPU and pm2 supervision of the worker processes.
"""

from .planner import LaunchPlan, LaunchPlanner, PlanSet, tier_for
from .supervisor import (
    Pm2Supervisor,
    ProcessSupervisor,
    SupervisedProcess,
    SupervisorBridge,
    parse_jlist,
)

__all__ = [
    "LaunchPlan",
    "LaunchPlanner",
    "PlanSet",
    "tier_for",
    "ProcessSupervisor",
    "Pm2Supervisor",
    "SupervisedProcess",
    "SupervisorBridge",
    "parse_jlist",
]
