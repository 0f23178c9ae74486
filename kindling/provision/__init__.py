"""
Provisioning Package.

Host toolchain installation and worker workspace preparation.
"""

from .installer import IdempotentInstaller
from .provisioner import EnvironmentProvisioner
from .recipes import RecipeBook, select_action
from .results import Dependency, StepResult, StepStatus
from .workspace import Workspace, WorkspaceBuilder

__all__ = [
    "Dependency",
    "StepResult",
    "StepStatus",
    "IdempotentInstaller",
    "RecipeBook",
    "select_action",
    "Workspace",
    "WorkspaceBuilder",
    "EnvironmentProvisioner",
]
