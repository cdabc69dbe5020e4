"""Thin wrappers around the kubectl, helm and yq command-line clients."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from fossa_diag.errors import CommandError, MissingDependencyError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands to completion and captures their output.

    No timeout is applied; a hung command blocks the collector until the
    operator interrupts it.
    """

    def run(
        self,
        args: Sequence[str],
        *,
        input_text: str | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Run ``args``; raise CommandError on non-zero exit when ``check`` is set."""
        argv = list(args)
        logger.debug("+ %s", shlex.join(argv))
        try:
            proc = subprocess.run(argv, input=input_text, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise MissingDependencyError(f"command not found: {argv[0]}") from e
        result = CommandResult(
            args=argv,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if result.returncode != 0:
            logger.debug("%s exited %d: %s", argv[0], result.returncode, result.stderr.strip())
            if check:
                raise CommandError(argv, result.returncode, result.stderr)
        return result


def _connection_flags(kubeconfig: Path | str | None, context: str | None, context_flag: str) -> list[str]:
    flags: list[str] = []
    if kubeconfig:
        flags.extend(["--kubeconfig", str(kubeconfig)])
    if context:
        flags.extend([context_flag, context])
    return flags


class Kubectl:
    """kubectl scoped to a single namespace."""

    def __init__(
        self,
        runner: CommandRunner,
        namespace: str,
        kubeconfig: Path | str | None = None,
        context: str | None = None,
    ) -> None:
        self.runner = runner
        self.namespace = namespace
        self._flags = _connection_flags(kubeconfig, context, "--context")

    def _argv(self, *args: str) -> list[str]:
        return ["kubectl", *self._flags, "--namespace", self.namespace, *args]

    def get(self, *resources: str, output: str | None = None, check: bool = False) -> CommandResult:
        argv = self._argv("get", *resources)
        if output:
            argv.extend(["-o", output])
        return self.runner.run(argv, check=check)

    def describe(self, *resources: str, check: bool = False) -> CommandResult:
        return self.runner.run(self._argv("describe", *resources), check=check)

    def logs(self, pod: str) -> CommandResult:
        return self.runner.run(self._argv("logs", pod, "--all-containers=true"), check=False)


class Helm:
    """helm release queries (read-only)."""

    def __init__(
        self,
        runner: CommandRunner,
        kubeconfig: Path | str | None = None,
        context: str | None = None,
    ) -> None:
        self.runner = runner
        self._flags = _connection_flags(kubeconfig, context, "--kube-context")

    def list_releases(self, namespace: str | None = None) -> list[dict[str, Any]]:
        """Return raw release records, across all namespaces when ``namespace`` is unset."""
        scope = ["--namespace", namespace] if namespace else ["--all-namespaces"]
        result = self.runner.run(["helm", *self._flags, *scope, "ls", "-o", "yaml"])
        records = yaml.safe_load(result.stdout) or []
        if not isinstance(records, list):
            raise CommandError(result.args, result.returncode, "unexpected release list format")
        return [r for r in records if isinstance(r, dict)]

    def get_manifest(self, release: str, namespace: str) -> str:
        result = self.runner.run(
            ["helm", *self._flags, "--namespace", namespace, "get", "manifest", release]
        )
        return result.stdout


class Yq:
    """Evaluates yq expressions over YAML documents passed on stdin."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def evaluate(self, expression: str, document: str, no_doc_separators: bool = True) -> str:
        argv = ["yq"]
        if no_doc_separators:
            argv.append("-N")
        argv.append(expression)
        return self.runner.run(argv, input_text=document).stdout
