"""Collection layer: staging, kubectl collection steps, and the archive."""

from fossa_diag.collection.collector import DiagnosticsCollector, countdown, not_running_pod_names
from fossa_diag.collection.orchestrator import CollectionResult, run_collection
from fossa_diag.collection.staging import StagingArea, pack_archive

__all__ = [
    "CollectionResult",
    "DiagnosticsCollector",
    "StagingArea",
    "countdown",
    "not_running_pod_names",
    "pack_archive",
    "run_collection",
]
