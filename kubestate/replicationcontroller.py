"""Metric families describing replication controllers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from kubestate.meta import ObjectMeta, owner_metrics, unix_seconds, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

__all__ = [
    "ReplicationControllerSpec",
    "ReplicationControllerStatus",
    "ReplicationController",
    "replication_controller_metric_families",
]

_DEFAULT_LABELS = ("namespace", "replicationcontroller")


@dataclass
class ReplicationControllerSpec:
    """Desired state of a replication controller."""

    replicas: int | None = None


@dataclass
class ReplicationControllerStatus:
    """Observed state of a replication controller."""

    replicas: int = 0
    fully_labeled_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    observed_generation: int = 0


@dataclass
class ReplicationController:
    """A replication controller object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ReplicationControllerSpec = field(default_factory=ReplicationControllerSpec)
    status: ReplicationControllerStatus = field(default_factory=ReplicationControllerStatus)


def _wrap(
    func: Callable[[ReplicationController], Family],
) -> Callable[[ReplicationController], Family]:
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda rc: (rc.metadata.namespace, rc.metadata.name),
        func,
    )


def _created(rc: ReplicationController) -> Family:
    created = rc.metadata.creation_timestamp
    if created is None:
        return Family([])
    return Family([Metric(value=float(unix_seconds(created)))])


def _status_field(attribute: str) -> Callable[[ReplicationController], Family]:
    def build(rc: ReplicationController) -> Family:
        return Family([Metric(value=float(getattr(rc.status, attribute)))])

    return build


def _spec_replicas(rc: ReplicationController) -> Family:
    if rc.spec.replicas is None:
        return Family([])
    return Family([Metric(value=float(rc.spec.replicas))])


def _metadata_generation(rc: ReplicationController) -> Family:
    return Family([Metric(value=float(rc.metadata.generation))])


def _owner(rc: ReplicationController) -> Family:
    return Family(owner_metrics(rc.metadata.owner_references))


def replication_controller_metric_families() -> list[FamilyGenerator]:
    """The generators for every replication controller metric family."""
    return [
        FamilyGenerator(
            "kube_replicationcontroller_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_status_replicas",
            "The number of replicas per ReplicationController.",
            MetricType.GAUGE,
            _wrap(_status_field("replicas")),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_status_fully_labeled_replicas",
            "The number of fully labeled replicas per ReplicationController.",
            MetricType.GAUGE,
            _wrap(_status_field("fully_labeled_replicas")),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_status_ready_replicas",
            "The number of ready replicas per ReplicationController.",
            MetricType.GAUGE,
            _wrap(_status_field("ready_replicas")),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_status_available_replicas",
            "The number of available replicas per ReplicationController.",
            MetricType.GAUGE,
            _wrap(_status_field("available_replicas")),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_status_observed_generation",
            "The generation observed by the ReplicationController controller.",
            MetricType.GAUGE,
            _wrap(_status_field("observed_generation")),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_spec_replicas",
            "Number of desired pods for a ReplicationController.",
            MetricType.GAUGE,
            _wrap(_spec_replicas),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_metadata_generation",
            "Sequence number representing a specific generation of the desired state.",
            MetricType.GAUGE,
            _wrap(_metadata_generation),
        ),
        FamilyGenerator(
            "kube_replicationcontroller_owner",
            "Information about the ReplicationController's owner.",
            MetricType.GAUGE,
            _wrap(_owner),
        ),
    ]