"""Fatal errors raised by the collector. Each one ends the run with exit status 1."""

from __future__ import annotations

from collections.abc import Sequence


class DiagnosticsError(Exception):
    """Base class for errors reported to the operator as ``ERROR: <message>``."""


class MissingDependencyError(DiagnosticsError):
    """A required external command is not installed."""


class InvalidSavePathError(DiagnosticsError):
    """The archive cannot be written to the requested path."""


class MissingInputError(DiagnosticsError):
    """Release name or namespace is missing and cannot be prompted for."""


class ReleaseNotFoundError(DiagnosticsError):
    """No Helm release matched the requested product, name, or namespace."""


class ReleaseValidationError(DiagnosticsError):
    """The selected release is not a deployment of the expected chart."""


class MissingMetadataError(DiagnosticsError):
    """A required field could not be read from the release record."""

    def __init__(self, field: str) -> None:
        super().__init__(f"failed to read {field} from the selected release")
        self.field = field


class CommandError(DiagnosticsError):
    """An external command required for collection exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no error output"
        super().__init__(f"'{' '.join(command)}' exited {returncode}: {detail}")
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
