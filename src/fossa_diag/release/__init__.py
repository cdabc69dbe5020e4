"""Release layer: Helm release records, selection, and manifest objects."""

from fossa_diag.release.models import HelmRelease, ObjectRef, ReleaseDescriptor, chart_version
from fossa_diag.release.objects import (
    enumerate_release_objects,
    filter_sensitive,
    format_object_list,
    is_sensitive,
    parse_object_list,
)
from fossa_diag.release.selection import (
    discover_releases,
    parse_selection,
    prompt_for_release,
    select_by_name,
    select_interactively,
)

__all__ = [
    "HelmRelease",
    "ObjectRef",
    "ReleaseDescriptor",
    "chart_version",
    "discover_releases",
    "enumerate_release_objects",
    "filter_sensitive",
    "format_object_list",
    "is_sensitive",
    "parse_object_list",
    "parse_selection",
    "prompt_for_release",
    "select_by_name",
    "select_interactively",
]
