"""Collect Kubernetes diagnostics for a FOSSA Helm release into a support tarball."""

__version__ = "0.1.0"
