"""Invocation options: flags merged over settings, plus interactive mode rules."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, replace
from pathlib import Path

from rich.console import Console

from fossa_diag.config import Settings
from fossa_diag.errors import InvalidSavePathError, MissingInputError


@dataclass(frozen=True)
class InvocationOptions:
    """Everything one run needs, resolved once and passed explicitly."""

    release_name: str | None
    namespace: str | None
    output_path: Path
    output_path_explicit: bool = False
    debug: bool = False
    explain_only: bool = False
    non_interactive: bool = False
    kubeconfig: Path | None = None
    context: str | None = None
    command: str = ""

    @property
    def has_release_inputs(self) -> bool:
        return bool(self.release_name and self.namespace)

    @property
    def interactive(self) -> bool:
        """Prompts are allowed unless both inputs were given or the environment forbids it."""
        return not self.non_interactive and not self.has_release_inputs


def resolve_options(args: argparse.Namespace, settings: Settings, command: str = "") -> InvocationOptions:
    """Merge parsed flags over settings. ``command`` is the command line as invoked."""
    output_path = args.output_path or settings.output_path
    return InvocationOptions(
        release_name=args.release_name or settings.release_name,
        namespace=args.namespace or settings.namespace,
        output_path=Path(output_path),
        output_path_explicit=args.output_path is not None,
        debug=args.debug,
        explain_only=args.explain_only,
        non_interactive=settings.non_interactive,
        kubeconfig=args.kubeconfig or settings.kubeconfig,
        context=args.context or settings.context,
        command=command,
    )


def validate_save_path(path: Path) -> Path:
    if not path.parent.is_dir() or path.is_dir():
        raise InvalidSavePathError(f"invalid save path {path}")
    return path


def confirm_save_path(options: InvocationOptions, console: Console) -> InvocationOptions:
    """Ask for the archive path when it was not given and prompting is allowed."""
    path = options.output_path
    if not options.output_path_explicit and options.interactive:
        console.print()
        try:
            answer = console.input(f"Save path for data [{path}]: ", markup=False).strip()
        except EOFError:
            answer = ""
        if answer:
            path = Path(answer).expanduser()
        console.print(f"Using: {path}", markup=False, highlight=False)
    return replace(options, output_path=validate_save_path(path))


def require_release_inputs(options: InvocationOptions) -> None:
    """Non-interactive runs must name both the release and its namespace."""
    if options.has_release_inputs or options.interactive:
        return
    raise MissingInputError(
        "NAMESPACE and RELEASE NAME must be provided with -n and -r in non-interactive mode."
    )
