"""Metric families describing pod disruption budgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from kubestate.meta import ObjectMeta, unix_seconds, wrap_object_func
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType

__all__ = [
    "PodDisruptionBudgetStatus",
    "PodDisruptionBudget",
    "pod_disruption_budget_metric_families",
]

_DEFAULT_LABELS = ("namespace", "poddisruptionbudget")


@dataclass
class PodDisruptionBudgetStatus:
    """Observed state of a pod disruption budget."""

    current_healthy: int = 0
    desired_healthy: int = 0
    disruptions_allowed: int = 0
    expected_pods: int = 0
    observed_generation: int = 0


@dataclass
class PodDisruptionBudget:
    """A pod disruption budget object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: PodDisruptionBudgetStatus = field(default_factory=PodDisruptionBudgetStatus)


def _wrap(func: Callable[[PodDisruptionBudget], Family]) -> Callable[[PodDisruptionBudget], Family]:
    return wrap_object_func(
        _DEFAULT_LABELS,
        lambda pdb: (pdb.metadata.namespace, pdb.metadata.name),
        func,
    )


def _created(pdb: PodDisruptionBudget) -> Family:
    created = pdb.metadata.creation_timestamp
    if created is None:
        return Family([])
    return Family([Metric(value=float(unix_seconds(created)))])


def _status_field(attribute: str) -> Callable[[PodDisruptionBudget], Family]:
    def build(pdb: PodDisruptionBudget) -> Family:
        return Family([Metric(value=float(getattr(pdb.status, attribute)))])

    return build


def pod_disruption_budget_metric_families() -> list[FamilyGenerator]:
    """The generators for every pod disruption budget metric family."""
    return [
        FamilyGenerator(
            "kube_poddisruptionbudget_created",
            "Unix creation timestamp",
            MetricType.GAUGE,
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_poddisruptionbudget_status_current_healthy",
            "Current number of healthy pods",
            MetricType.GAUGE,
            _wrap(_status_field("current_healthy")),
        ),
        FamilyGenerator(
            "kube_poddisruptionbudget_status_desired_healthy",
            "Minimum desired number of healthy pods",
            MetricType.GAUGE,
            _wrap(_status_field("desired_healthy")),
        ),
        FamilyGenerator(
            "kube_poddisruptionbudget_status_pod_disruptions_allowed",
            "Number of pod disruptions that are currently allowed",
            MetricType.GAUGE,
            _wrap(_status_field("disruptions_allowed")),
        ),
        FamilyGenerator(
            "kube_poddisruptionbudget_status_expected_pods",
            "Total number of pods counted by this disruption budget",
            MetricType.GAUGE,
            _wrap(_status_field("expected_pods")),
        ),
        FamilyGenerator(
            "kube_poddisruptionbudget_status_observed_generation",
            "Most recent generation observed when updating this PDB status",
            MetricType.GAUGE,
            _wrap(_status_field("observed_generation")),
        ),
    ]