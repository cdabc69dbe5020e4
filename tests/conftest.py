"""Test configuration and fixtures."""

from __future__ import annotations

import io
from collections.abc import Sequence
from typing import Any

import pytest
import yaml
from rich.console import Console

from fossa_diag.config import Settings
from fossa_diag.errors import CommandError
from fossa_diag.tooling import CommandResult, CommandRunner

MANIFEST = """\
---
# Source: fossa-core/templates/configmap.yaml
apiVersion: v1
kind: ConfigMap
metadata:
  name: myrelease-config
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: myrelease-scotland-yard
---
apiVersion: v1
kind: Service
metadata:
  name: myrelease-core
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: myrelease-core
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: myrelease-core
"""


def _pod(name: str, phase: str, image: str) -> dict[str, Any]:
    return {
        "metadata": {"name": name},
        "spec": {"containers": [{"name": "main", "image": image}]},
        "status": {"phase": phase, "containerStatuses": [{"name": "main", "image": image}]},
    }


class FakeCluster(CommandRunner):
    """Answers kubectl, helm and yq invocations from in-memory state."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.releases: list[dict[str, Any]] = [
            {
                "name": "myrelease",
                "namespace": "myns",
                "chart": "fossa-core-1.2.3",
                "revision": "1",
                "status": "deployed",
                "app_version": "4.0.0",
            },
            {
                "name": "other",
                "namespace": "infra",
                "chart": "ingress-nginx-4.0.1",
                "revision": "3",
                "status": "deployed",
            },
        ]
        self.manifest = MANIFEST
        self.pods = [
            _pod("myrelease-core-abc", "Running", "quay.io/fossa/core:4.0.0"),
            _pod("myrelease-core-crash", "Pending", "quay.io/fossa/core:4.0.0"),
            _pod("myrelease-migrate", "Failed", "quay.io/fossa/core:4.0.0"),
            _pod("myrelease-job-done", "Succeeded", "quay.io/fossa/core:4.0.0"),
            _pod("sidecar-pending", "Pending", "docker.io/library/redis:7"),
        ]
        self.log_failures: set[str] = set()
        self.interrupt_on: tuple[str, ...] | None = None

    def run(
        self,
        args: Sequence[str],
        *,
        input_text: str | None = None,
        check: bool = True,
    ) -> CommandResult:
        argv = list(args)
        self.calls.append(argv)
        if self.interrupt_on and all(part in argv for part in self.interrupt_on):
            raise KeyboardInterrupt
        returncode, stdout, stderr = self._respond(argv, input_text)
        result = CommandResult(args=argv, returncode=returncode, stdout=stdout, stderr=stderr)
        if check and returncode != 0:
            raise CommandError(argv, returncode, stderr)
        return result

    def _respond(self, argv: list[str], input_text: str | None) -> tuple[int, str, str]:
        tool = argv[0]
        if tool == "helm":
            if "ls" in argv:
                releases = self.releases
                if "--namespace" in argv:
                    ns = argv[argv.index("--namespace") + 1]
                    releases = [r for r in releases if r["namespace"] == ns]
                return 0, yaml.safe_dump(releases), ""
            if "manifest" in argv:
                return 0, self.manifest, ""
        if tool == "yq":
            lines = []
            for doc in yaml.safe_load_all(input_text or ""):
                if doc:
                    lines.append(f"{doc.get('kind', '')}/{doc.get('metadata', {}).get('name', '')}")
            return 0, "\n".join(lines) + "\n", ""
        if tool == "kubectl":
            verb_index = argv.index("--namespace") + 2
            verb, rest = argv[verb_index], argv[verb_index + 1 :]
            if verb == "get" and rest[:1] == ["pods"] and "yaml" in rest:
                return 0, yaml.safe_dump({"items": self.pods}), ""
            if verb == "logs":
                if rest[0] in self.log_failures:
                    return 1, "", f'Error from server: container "main" in pod "{rest[0]}" is waiting'
                return 0, f"log output for {rest[0]}\n", ""
            if verb == "get" and rest == ["events"]:
                return 0, "LAST SEEN   TYPE      REASON    OBJECT\n1m          Warning   BackOff   pod/x\n", ""
            return 0, f"{verb} {' '.join(rest)}\n", ""
        return 127, "", f"unexpected command {argv}"

    def kubectl_calls(self, verb: str) -> list[list[str]]:
        return [c for c in self.calls if c[0] == "kubectl" and verb in c]


@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def console() -> Console:
    """Console that records output instead of writing to the terminal."""
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None, soft_wrap=True)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    for var in ("NON_INTERACTIVE", "FOSSA_DIAG_NON_INTERACTIVE", "NO_EXIT", "FOSSA_DIAG_NO_EXIT"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None, countdown_seconds=0, step_pause_seconds=0)


@pytest.fixture
def feed_input(monkeypatch: pytest.MonkeyPatch):
    """Replace builtins.input with a scripted list of answers."""

    def _feed(*answers: str) -> list[str]:
        remaining = list(answers)
        prompts: list[str] = []

        def fake_input(prompt: str = "") -> str:
            prompts.append(prompt)
            if not remaining:
                raise EOFError
            return remaining.pop(0)

        monkeypatch.setattr("builtins.input", fake_input)
        return prompts

    return _feed
