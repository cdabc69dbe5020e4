"""Structured models for Helm releases and the objects they render."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fossa_diag.errors import MissingMetadataError


class HelmRelease(BaseModel):
    """One record from ``helm ls -o yaml``; unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    namespace: str = ""
    chart: str = ""
    revision: str | int | None = None
    status: str | None = None
    updated: str | None = None
    app_version: str | None = None

    def is_chart(self, chart_name: str) -> bool:
        return chart_name in self.chart

    def menu_label(self) -> str:
        return f"{self.name} (namespace={self.namespace} chart={self.chart})"

    def record(self) -> dict[str, Any]:
        """The release as helm reported it, for writing into the bundle."""
        return self.model_dump(exclude_none=True)


def chart_version(chart: str) -> str:
    """Version segment of a chart identifier: ``fossa-core-1.2.3`` -> ``1.2.3``."""
    segments = chart.split("-")
    return segments[2] if len(segments) >= 3 else ""


class ReleaseDescriptor(BaseModel):
    """Release coordinates every collection step runs against."""

    name: str
    namespace: str
    chart: str
    chart_version: str

    @classmethod
    def from_release(cls, release: HelmRelease) -> ReleaseDescriptor:
        """Extract the descriptor; a missing field raises MissingMetadataError."""
        if not release.namespace:
            raise MissingMetadataError("namespace")
        if not release.name:
            raise MissingMetadataError("release name")
        version = chart_version(release.chart)
        if not version:
            raise MissingMetadataError("chart version")
        return cls(
            name=release.name,
            namespace=release.namespace,
            chart=release.chart,
            chart_version=version,
        )


class ObjectRef(BaseModel):
    """A cluster object rendered by the release manifest."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @property
    def identifier(self) -> str:
        """``Kind/name``, the form kubectl accepts as a resource argument."""
        return f"{self.kind}/{self.name}"

    @classmethod
    def parse(cls, identifier: str) -> ObjectRef | None:
        kind, _, name = identifier.strip().partition("/")
        if not kind or not name:
            return None
        return cls(kind=kind, name=name)
