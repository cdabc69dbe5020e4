"""Orchestrator: select release → enumerate objects → collect → archive."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import yaml
from rich.console import Console

from fossa_diag import __version__
from fossa_diag.collection.collector import DiagnosticsCollector, countdown
from fossa_diag.collection.kube_context import describe_kube_context
from fossa_diag.collection.messages import RELEASE_INFO
from fossa_diag.collection.staging import StagingArea
from fossa_diag.config import Settings, get_settings
from fossa_diag.options import InvocationOptions
from fossa_diag.release import (
    HelmRelease,
    ReleaseDescriptor,
    enumerate_release_objects,
    filter_sensitive,
    format_object_list,
    select_by_name,
    select_interactively,
)
from fossa_diag.tooling import CommandRunner, Helm, Kubectl, Yq

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """Result of a full collection run."""

    archive_path: Path | None
    release: ReleaseDescriptor | None = None
    files: list[str] = field(default_factory=list)
    not_running_pods: list[str] = field(default_factory=list)


def _select_release(
    options: InvocationOptions,
    settings: Settings,
    helm: Helm,
    staging: StagingArea,
    console: Console,
) -> HelmRelease:
    release_name, namespace = options.release_name, options.namespace
    if release_name and namespace:
        return select_by_name(helm, settings.chart_name, release_name, namespace)
    return select_interactively(
        helm,
        console,
        settings.chart_name,
        staging.scratch,
        namespace=options.namespace,
        release_name=options.release_name,
    )


def _collection_info(options: InvocationOptions, release: ReleaseDescriptor, started_at: datetime) -> str:
    kube_context = describe_kube_context(options.kubeconfig, options.context)
    info = {
        "tool_version": __version__,
        "started_at": started_at.isoformat(),
        "command": options.command,
        "interactive": options.interactive,
        "release": release.model_dump(),
        "kube_context": kube_context.model_dump(exclude_none=True),
    }
    return yaml.safe_dump(info, sort_keys=False)


def run_collection(
    options: InvocationOptions,
    settings: Settings | None = None,
    console: Console | None = None,
    runner: CommandRunner | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CollectionResult:
    """
    Collect diagnostics for one release into ``options.output_path``.

    The archive is written when the staging area closes, so a fatal error or
    interrupt after this point still leaves a (partial) bundle behind.
    """
    opts = settings or get_settings()
    c = console or Console(soft_wrap=True)
    cmd = runner or CommandRunner()
    started_at = datetime.now(timezone.utc)
    helm = Helm(cmd, kubeconfig=options.kubeconfig, context=options.context)
    yq = Yq(cmd)

    result = CollectionResult(archive_path=None)
    staging = StagingArea(options.output_path, c)
    try:
        with staging:
            # Select
            selected = _select_release(options, opts, helm, staging, c)
            record = yaml.safe_dump(selected.record(), sort_keys=False)
            staging.write("fossa.selected.release.yaml", record)
            c.print(RELEASE_INFO.format(record=record), markup=False, highlight=False)

            release = ReleaseDescriptor.from_release(selected)
            result.release = release
            staging.write("collection.info.yaml", _collection_info(options, release, started_at))

            # Enumerate
            c.print()
            c.print("Acquiring object list from helm manifest.")
            refs = enumerate_release_objects(helm, yq, release)
            staging.write("release.objects.yaml", format_object_list(refs))
            filtered = filter_sensitive(refs, release.name)
            staging.write("release.objects.filtered.yaml", format_object_list(filtered))
            logger.info("Release %s renders %d objects, %d collectable", release.name, len(refs), len(filtered))

            countdown(opts.countdown_seconds, c, sleep=sleep)

            # Collect
            kubectl = Kubectl(cmd, release.namespace, kubeconfig=options.kubeconfig, context=options.context)
            collector = DiagnosticsCollector(
                kubectl,
                staging,
                c,
                release,
                image_marker=opts.image_marker,
                step_pause_seconds=opts.step_pause_seconds if options.interactive else 0,
                sleep=sleep,
            )
            collector.collect(filtered)
            result.not_running_pods = list(collector.not_running_pods)
            result.files = sorted(p.name for p in staging.capture.iterdir())
    finally:
        result.archive_path = staging.archive_path
    return result
