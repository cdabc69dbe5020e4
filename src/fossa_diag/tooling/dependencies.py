"""Check that the external commands the collector shells out to are installed."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console

from fossa_diag.errors import MissingDependencyError

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 64


@dataclass(frozen=True)
class RequiredTool:
    """An external command plus what it is used for and where to get it."""

    name: str
    purpose: str
    install_url: str


REQUIRED_TOOLS: tuple[RequiredTool, ...] = (
    RequiredTool("yq", "required for reading cluster manifests", "https://github.com/mikefarah/yq#install"),
    RequiredTool(
        "kubectl",
        "required for accessing kubernetes cluster",
        "https://kubernetes.io/docs/tasks/tools/#kubectl",
    ),
    RequiredTool("helm", "required for reading helm release info", "https://helm.sh/docs/intro/install/"),
)


def _print_missing(tool: RequiredTool, console: Console) -> None:
    console.print()
    console.print(f"❌ Command not found: {tool.name}", markup=False)
    console.print()
    console.print(tool.purpose, markup=False)
    console.print()
    console.print("Info about installing this command can be found here:")
    console.print(f"- {tool.install_url}", markup=False, highlight=False)


def check_dependencies(
    tools: Iterable[RequiredTool],
    console: Console,
    exit_on_missing: bool = True,
) -> list[RequiredTool]:
    """
    Look up each tool on PATH.

    With ``exit_on_missing`` the first missing tool raises MissingDependencyError.
    Otherwise every tool is reported (found ones included) and the missing ones
    are returned for the caller to act on.
    """
    missing: list[RequiredTool] = []
    for tool in tools:
        path = shutil.which(tool.name)
        if path:
            logger.debug("Found %s at %s", tool.name, path)
            if not exit_on_missing:
                console.print(f"✅ Command {tool.name} was found.", markup=False)
            continue

        _print_missing(tool, console)
        if exit_on_missing:
            raise MissingDependencyError(f"required command {tool.name} is not installed")
        console.print(SEPARATOR)
        console.print()
        missing.append(tool)
    return missing
