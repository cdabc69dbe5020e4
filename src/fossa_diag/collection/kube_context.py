"""Identify which cluster the collection ran against, from the local kubeconfig."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from kubernetes import config
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class KubeContextInfo(BaseModel):
    """Kubeconfig context kubectl and helm will talk to."""

    name: str = "unknown"
    cluster: str | None = None
    user: str | None = None
    namespace: str | None = None


def _context_info(entry: dict[str, Any]) -> KubeContextInfo:
    details = entry.get("context") or {}
    return KubeContextInfo(
        name=entry.get("name") or "unknown",
        cluster=details.get("cluster"),
        user=details.get("user"),
        namespace=details.get("namespace"),
    )


def describe_kube_context(kubeconfig: Path | str | None = None, context: str | None = None) -> KubeContextInfo:
    """Return the requested (or current) context; unknown if kubeconfig cannot be read."""
    kwargs: dict[str, Any] = {}
    if kubeconfig:
        kwargs["config_file"] = str(kubeconfig)
    try:
        contexts, active = config.list_kube_config_contexts(**kwargs)
    except (config.ConfigException, yaml.YAMLError, OSError) as e:
        logger.warning("Could not read kubeconfig: %s", e)
        return KubeContextInfo(name=context or "unknown")

    if context:
        for entry in contexts or []:
            if entry.get("name") == context:
                return _context_info(entry)
        logger.warning("Context %s not found in kubeconfig", context)
        return KubeContextInfo(name=context)
    return _context_info(active or {})
