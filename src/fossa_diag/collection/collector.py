"""Run the read-only kubectl queries that make up a diagnostics bundle."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console

from fossa_diag.collection.messages import COUNTDOWN_BANNER, NO_NOT_RUNNING_PODS
from fossa_diag.collection.staging import StagingArea
from fossa_diag.release import ObjectRef, ReleaseDescriptor
from fossa_diag.tooling import CommandResult, Kubectl

logger = logging.getLogger(__name__)

# Phases that mean a pod finished or is doing its job
HEALTHY_POD_PHASES = frozenset({"Running", "Succeeded"})


def countdown(seconds: int, console: Console, sleep: Callable[[float], None] = time.sleep) -> None:
    """Give the operator ``seconds`` one-second ticks to cancel before collection starts."""
    console.print(COUNTDOWN_BANNER.format(seconds=seconds))
    for remaining in range(seconds, 0, -1):
        console.print(f"{remaining}...", end="")
        sleep(1)
    console.print()
    console.print("Starting...")


def _container_images(pod: dict[str, Any]) -> list[str]:
    status = pod.get("status") or {}
    statuses = status.get("containerStatuses") or []
    if statuses:
        return [cs.get("image") or "" for cs in statuses]
    # not scheduled yet, so nothing has reported status
    spec = pod.get("spec") or {}
    return [c.get("image") or "" for c in spec.get("containers") or []]


def is_not_running_product_pod(pod: dict[str, Any], image_marker: str) -> bool:
    """Pod is stuck or failed and runs at least one product image."""
    phase = (pod.get("status") or {}).get("phase")
    if phase in HEALTHY_POD_PHASES:
        return False
    return any(image_marker in image for image in _container_images(pod))


def not_running_pod_names(pods_document: str, image_marker: str) -> list[str]:
    """Names of not-running product pods in a ``kubectl get pods -o yaml`` document."""
    data = yaml.safe_load(pods_document) or {}
    names: list[str] = []
    for pod in data.get("items") or []:
        if not isinstance(pod, dict) or not is_not_running_product_pod(pod, image_marker):
            continue
        name = (pod.get("metadata") or {}).get("name")
        if name and name not in names:
            names.append(name)
    return names


class DiagnosticsCollector:
    """Runs each collection step in order, writing one file per step."""

    def __init__(
        self,
        kubectl: Kubectl,
        staging: StagingArea,
        console: Console,
        release: ReleaseDescriptor,
        image_marker: str = "fossa",
        step_pause_seconds: float = 0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.kubectl = kubectl
        self.staging = staging
        self.console = console
        self.release = release
        self.image_marker = image_marker
        self.step_pause_seconds = step_pause_seconds
        self._sleep = sleep
        self.files: list[Path] = []
        self.not_running_pods: list[str] = []

    def _announce(self, message: str) -> None:
        self.console.print()
        self.console.print(message, markup=False, highlight=False)
        if self.step_pause_seconds:
            self._sleep(self.step_pause_seconds)

    def _save(self, name: str, result: CommandResult, what: str) -> Path:
        if not result.ok:
            logger.warning("Failed to %s: %s", what, result.stderr.strip() or f"exit code {result.returncode}")
        path = self.staging.write(name, result.stdout)
        self.files.append(path)
        return path

    def get_release_objects(self, refs: list[ObjectRef]) -> Path | None:
        self._announce(f"Doing kubectl get for all {self.image_marker} objects.")
        if not refs:
            logger.warning("No release objects to get")
            return None
        result = self.kubectl.get(*(r.identifier for r in refs))
        self.console.print(result.stdout, end="", markup=False, highlight=False)
        return self._save("kubectl-get-release-objects.txt", result, "get release objects")

    def describe_release_objects(self, refs: list[ObjectRef]) -> Path | None:
        self._announce(f"Gathering descriptions of all {self.image_marker} objects.")
        if not refs:
            logger.warning("No release objects to describe")
            return None
        result = self.kubectl.describe(*(r.identifier for r in refs))
        return self._save("kubectl-describe-release-objects.txt", result, "describe release objects")

    def describe_pods(self) -> Path:
        self._announce("Gathering descriptions of all the pods in the namespace.")
        return self._save("kubectl-describe-pods.txt", self.kubectl.describe("pods"), "describe pods")

    def find_not_running_pods(self) -> list[str]:
        self._announce(f"Identifying non-running {self.image_marker} pods.")
        result = self.kubectl.get("pods", output="yaml")
        if not result.ok:
            logger.warning("Failed to list pods: %s", result.stderr.strip())
            self.not_running_pods = []
        else:
            self.not_running_pods = not_running_pod_names(result.stdout, self.image_marker)
        path = self.staging.write(
            "pods.not-running.yaml", yaml.safe_dump(self.not_running_pods, default_flow_style=False)
        )
        self.files.append(path)
        return self.not_running_pods

    def get_not_running_pods(self) -> Path:
        name = "kubectl-get-pods-not-running.txt"
        if not self.not_running_pods:
            path = self.staging.write(name, NO_NOT_RUNNING_PODS.format(marker=self.image_marker))
            self.files.append(path)
            return path
        result = self.kubectl.get("pods", *self.not_running_pods)
        return self._save(name, result, "get non-running pods")

    def collect_pod_logs(self) -> list[Path]:
        self._announce(f"Gathering logs for non-running {self.image_marker} pods.")
        paths: list[Path] = []
        for pod in self.not_running_pods:
            self.console.print(f"Getting logs for {pod}", markup=False, highlight=False)
            result = self.kubectl.logs(pod)
            if not result.ok:
                logger.debug("Logs unavailable for %s: %s", pod, result.stderr.strip())
            path = self.staging.write(f"kubectl-logs-{pod}.log", result.stdout)
            self.files.append(path)
            paths.append(path)
        return paths

    def get_events(self) -> Path:
        self._announce(f"Gathering events in the namespace {self.release.namespace}")
        return self._save("kubectl-get-events.txt", self.kubectl.get("events"), "get events")

    def collect(self, refs: list[ObjectRef]) -> list[Path]:
        """Run every step in order against the filtered release objects."""
        self.get_release_objects(refs)
        self.describe_release_objects(refs)
        self.describe_pods()
        self.find_not_running_pods()
        self.get_not_running_pods()
        self.collect_pod_logs()
        self.get_events()
        return self.files
