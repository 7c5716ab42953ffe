"""Kubernetes object state rendered as Prometheus metric families."""

__version__ = "0.1.0"