"""Find the fossa-core release to collect: from flags, or via a numbered menu."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml
from rich.console import Console

from fossa_diag.errors import MissingInputError, ReleaseNotFoundError, ReleaseValidationError
from fossa_diag.release.models import HelmRelease
from fossa_diag.tooling import Helm

logger = logging.getLogger(__name__)

SELECTION_PROMPT = "Select which {chart} release to collect info about: "


def discover_releases(
    helm: Helm,
    chart_name: str,
    namespace: str | None = None,
    release_name: str | None = None,
) -> list[HelmRelease]:
    """List releases of ``chart_name``, optionally narrowed to a namespace or name."""
    releases = [HelmRelease.model_validate(r) for r in helm.list_releases(namespace)]
    matches = [r for r in releases if r.is_chart(chart_name)]
    if release_name:
        matches = [r for r in matches if r.name == release_name]
    if not matches:
        raise ReleaseNotFoundError(f"no releases found for {chart_name}")
    return matches


def parse_selection(raw: str, count: int) -> int | None:
    """Turn a 1-based menu answer into a list index, or None if it is not valid."""
    answer = raw.strip()
    if not re.fullmatch(r"[0-9]+", answer):
        return None
    index = int(answer) - 1
    if index < 0 or index >= count:
        return None
    return index


def prompt_for_release(releases: list[HelmRelease], console: Console, chart_name: str) -> HelmRelease:
    """Show the menu and keep asking until a valid entry is chosen."""
    for number, release in enumerate(releases, start=1):
        console.print(f"   {number} ) {release.menu_label()}", markup=False, highlight=False)

    while True:
        console.print()
        try:
            raw = console.input(SELECTION_PROMPT.format(chart=chart_name), markup=False)
        except EOFError:
            raise MissingInputError("no release was selected") from None
        console.print()
        index = parse_selection(raw, len(releases))
        if index is not None:
            logger.debug("Selected release %s", releases[index].name)
            return releases[index]
        console.print("Invalid entry. Try again.")


def write_release_list(releases: list[HelmRelease], path: Path) -> None:
    entries = [{"key": n, "value": r.record()} for n, r in enumerate(releases, start=1)]
    path.write_text(yaml.safe_dump(entries, sort_keys=False), encoding="utf-8")


def select_interactively(
    helm: Helm,
    console: Console,
    chart_name: str,
    scratch_dir: Path,
    namespace: str | None = None,
    release_name: str | None = None,
) -> HelmRelease:
    console.print()
    console.print(f"Listing {chart_name} releases.", markup=False)
    releases = discover_releases(helm, chart_name, namespace=namespace, release_name=release_name)
    write_release_list(releases, scratch_dir / "fossa.releases.yaml")
    return prompt_for_release(releases, console, chart_name)


def select_by_name(helm: Helm, chart_name: str, release_name: str, namespace: str) -> HelmRelease:
    """Look up the release named on the command line and check it is the product chart."""
    records = [HelmRelease.model_validate(r) for r in helm.list_releases(namespace)]
    for release in records:
        if release.name != release_name:
            continue
        if not release.is_chart(chart_name):
            raise ReleaseValidationError(f"release selected is not {chart_name}")
        return release
    raise ReleaseNotFoundError(f"release {release_name} not found in namespace {namespace}")
