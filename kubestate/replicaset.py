"""Metric families describing replica sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from kubestate.meta import (
    ObjectMeta,
    create_label_keys_values,
    owner_metrics,
    unix_seconds,
    wrap_object_func,
)
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

__all__ = [
    "ReplicaSetSpec",
    "ReplicaSetStatus",
    "ReplicaSet",
    "replica_set_metric_families",
]

_DEFAULT_LABELS = ("namespace", "replicaset")
_LABELS_NAME = "kube_replicaset_labels"
_LABELS_HELP = "Kubernetes labels converted to Prometheus labels."


@dataclass
class ReplicaSetSpec:
    """Desired state of a replica set."""

    replicas: int | None = None


@dataclass
class ReplicaSetStatus:
    """Observed state of a replica set."""

    replicas: int = 0
    fully_labeled_replicas: int = 0
    ready_replicas: int = 0
    observed_generation: int = 0


@dataclass
class ReplicaSet:
    """A replica set object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ReplicaSetSpec = field(default_factory=ReplicaSetSpec)
    status: ReplicaSetStatus = field(default_factory=ReplicaSetStatus)


def _wrap(func: Callable[[ReplicaSet], Family]) -> Callable[[ReplicaSet], Family]:
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda rs: (rs.metadata.namespace, rs.metadata.name),
        func,
    )


def _created(rs: ReplicaSet) -> Family:
    created = rs.metadata.creation_timestamp
    if created is None:
        return Family([])
    return Family([Metric(value=float(unix_seconds(created)))])


def _status_field(attribute: str) -> Callable[[ReplicaSet], Family]:
    def build(rs: ReplicaSet) -> Family:
        return Family([Metric(value=float(getattr(rs.status, attribute)))])

    return build


def _spec_replicas(rs: ReplicaSet) -> Family:
    if rs.spec.replicas is None:
        return Family([])
    return Family([Metric(value=float(rs.spec.replicas))])


def _metadata_generation(rs: ReplicaSet) -> Family:
    return Family([Metric(value=float(rs.metadata.generation))])


def _owner(rs: ReplicaSet) -> Family:
    return Family(owner_metrics(rs.metadata.owner_references))


def _labels(allow_labels: Sequence[str] | None) -> Callable[[ReplicaSet], Family]:
    def build(rs: ReplicaSet) -> Family:
        keys, values = create_label_keys_values(rs.metadata.labels, allow_labels)
        return Family([Metric(keys, values, 1)])

    return build


def replica_set_metric_families(allow_labels: Sequence[str] | None = None) -> list[FamilyGenerator]:
    """The generators for every replica set metric family."""
    return [
        FamilyGenerator(
            "kube_replicaset_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_replicaset_status_replicas",
            "The number of replicas per ReplicaSet.",
            MetricType.GAUGE,
            _wrap(_status_field("replicas")),
        ),
        FamilyGenerator(
            "kube_replicaset_status_fully_labeled_replicas",
            "The number of fully labeled replicas per ReplicaSet.",
            MetricType.GAUGE,
            _wrap(_status_field("fully_labeled_replicas")),
        ),
        FamilyGenerator(
            "kube_replicaset_status_ready_replicas",
            "The number of ready replicas per ReplicaSet.",
            MetricType.GAUGE,
            _wrap(_status_field("ready_replicas")),
        ),
        FamilyGenerator(
            "kube_replicaset_status_observed_generation",
            "The generation observed by the ReplicaSet controller.",
            MetricType.GAUGE,
            _wrap(_status_field("observed_generation")),
        ),
        FamilyGenerator(
            "kube_replicaset_spec_replicas",
            "Number of desired pods for a ReplicaSet.",
            MetricType.GAUGE,
            _wrap(_spec_replicas),
        ),
        FamilyGenerator(
            "kube_replicaset_metadata_generation",
            "Sequence number representing a specific generation of the desired state.",
            MetricType.GAUGE,
            _wrap(_metadata_generation),
        ),
        FamilyGenerator(
            "kube_replicaset_owner",
            "Information about the ReplicaSet's owner.",
            MetricType.GAUGE,
            _wrap(_owner),
        ),
        FamilyGenerator(
            _LABELS_NAME,
            _LABELS_HELP,
            MetricType.GAUGE,
            _wrap(_labels(allow_labels)),
        ),
    ]