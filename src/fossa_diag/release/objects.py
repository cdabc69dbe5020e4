"""Enumerate the objects a release renders and filter out credential-bearing ones."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fossa_diag.release.models import ObjectRef, ReleaseDescriptor
from fossa_diag.tooling import Helm, Yq

logger = logging.getLogger(__name__)

# kind/name for every document in the manifest; empty results are dropped
MANIFEST_OBJECTS_EXPR = '[.kind, .metadata.name] | join("/") | select((.|length)!=0)'

# ConfigMaps named <release>-<suffix> carry configuration secrets
SENSITIVE_CONFIGMAP_SUFFIXES = ("config", "scotland-yard")


def parse_object_list(text: str) -> list[ObjectRef]:
    """Parse ``Kind/name`` lines into sorted, de-duplicated references."""
    refs: set[ObjectRef] = set()
    for line in text.splitlines():
        ref = ObjectRef.parse(line)
        if ref is None:
            if line.strip():
                logger.debug("Skipping manifest entry without kind or name: %r", line)
            continue
        refs.add(ref)
    return sorted(refs, key=lambda r: r.identifier)


def enumerate_release_objects(helm: Helm, yq: Yq, release: ReleaseDescriptor) -> list[ObjectRef]:
    """List every object in the release's rendered manifest. Failures are fatal."""
    manifest = helm.get_manifest(release.name, release.namespace)
    return parse_object_list(yq.evaluate(MANIFEST_OBJECTS_EXPR, manifest))


def is_sensitive(ref: ObjectRef, release_name: str) -> bool:
    """True for objects whose contents must never leave the cluster."""
    if ref.kind != "ConfigMap":
        return False
    return ref.name in {f"{release_name}-{suffix}" for suffix in SENSITIVE_CONFIGMAP_SUFFIXES}


def filter_sensitive(refs: Iterable[ObjectRef], release_name: str) -> list[ObjectRef]:
    """Drop denylisted objects, keeping the input order."""
    return [ref for ref in refs if not is_sensitive(ref, release_name)]


def format_object_list(refs: Iterable[ObjectRef]) -> str:
    lines = [ref.identifier for ref in refs]
    return "\n".join(lines) + "\n" if lines else ""
