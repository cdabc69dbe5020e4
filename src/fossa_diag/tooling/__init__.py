"""Tooling layer: external command wrappers and dependency checks."""

from fossa_diag.tooling.commands import CommandResult, CommandRunner, Helm, Kubectl, Yq
from fossa_diag.tooling.dependencies import REQUIRED_TOOLS, RequiredTool, check_dependencies

__all__ = [
    "CommandResult",
    "CommandRunner",
    "Helm",
    "Kubectl",
    "Yq",
    "REQUIRED_TOOLS",
    "RequiredTool",
    "check_dependencies",
]
