"""Metric families describing resource quotas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from kubestate.meta import ObjectMeta, unix_seconds, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType
from kubestate.quantity import Quantity

__all__ = [
    "ResourceQuotaSpec",
    "ResourceQuotaStatus",
    "ResourceQuota",
    "resource_quota_metric_families",
]

_DEFAULT_LABELS = ("namespace", "resourcequota")


@dataclass
class ResourceQuotaSpec:
    """Desired hard limits of a resource quota."""

    hard: dict[str, Quantity] = field(default_factory=dict)


@dataclass
class ResourceQuotaStatus:
    """Enforced hard limits and current usage of a resource quota."""

    hard: dict[str, Quantity] = field(default_factory=dict)
    used: dict[str, Quantity] = field(default_factory=dict)


@dataclass
class ResourceQuota:
    """A resource quota object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ResourceQuotaSpec = field(default_factory=ResourceQuotaSpec)
    status: ResourceQuotaStatus = field(default_factory=ResourceQuotaStatus)


def _wrap(func: Callable[[ResourceQuota], Family]) -> Callable[[ResourceQuota], Family]:
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda quota: (quota.metadata.namespace, quota.metadata.name),
        func,
    )


def _created(quota: ResourceQuota) -> Family:
    created = quota.metadata.creation_timestamp
    if created is None:
        return Family([])
    return Family([Metric(value=float(unix_seconds(created)))])


def _quota(quota: ResourceQuota) -> Family:
    keys = ["resource", "type"]
    sections = (("hard", quota.status.hard), ("used", quota.status.used))
    return Family(
        [
            Metric(list(keys), [resource, kind], qty.milli_value() / 1000)
            for kind, resources in sections
            for resource, qty in resources.items()
        ]
    )


def resource_quota_metric_families() -> list[FamilyGenerator]:
    """The generators for every resource quota metric family."""
    return [
        FamilyGenerator(
            "kube_resourcequota_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_resourcequota",
            "Information about resource quota.",
            MetricType.GAUGE,
            _wrap(_quota),
        ),
    ]