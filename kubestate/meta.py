"""Object metadata and helpers shared by the metric stores."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from kubestate.metric import Family, Metric

__all__ = [
    "ConditionStatus",
    "OwnerReference",
    "ObjectMeta",
    "LABEL_WILDCARD",
    "unix_seconds",
    "bool_float",
    "sanitize_label_name",
    "is_huge_page_resource_name",
    "is_attachable_volume_resource_name",
    "is_extended_resource_name",
    "create_label_keys_values",
    "condition_metrics",
    "owner_metrics",
    "get_controller_of",
    "wrap_object_func",
]

LABEL_WILDCARD = "*"

_INVALID_LABEL_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_QUALIFIED_NAME = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_DNS1123_SUBDOMAIN = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
)
_HUGE_PAGES_PREFIX = "hugepages-"
_ATTACHABLE_VOLUMES_PREFIX = "attachable-volumes-"
_REQUESTS_PREFIX = "requests."
_DEFAULT_NAMESPACE_PREFIX = "kubernetes.io/"


class ConditionStatus(str, Enum):
    """Status of an object condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class OwnerReference:
    """A reference to an owning object."""

    kind: str = ""
    name: str = ""
    controller: bool | None = None


@dataclass
class ObjectMeta:
    """Metadata common to every object."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    generation: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    owner_references: list[OwnerReference] = field(default_factory=list)
    creation_timestamp: datetime | None = None
    deletion_timestamp: datetime | None = None


def unix_seconds(moment: datetime) -> int:
    """Whole seconds since the epoch; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())


def bool_float(value: bool) -> float:
    """Convert a truth value to a sample value: 1.0 for true, 0.0 for false."""
    return float(bool(value))


def sanitize_label_name(name: str) -> str:
    """Replace every character not allowed in a label name with an underscore."""
    return _INVALID_LABEL_CHARS.sub("_", name)


def is_huge_page_resource_name(name: str) -> bool:
    return name.startswith(_HUGE_PAGES_PREFIX)


def is_attachable_volume_resource_name(name: str) -> bool:
    return name.startswith(_ATTACHABLE_VOLUMES_PREFIX)


def _is_native_resource(name: str) -> bool:
    return "/" not in name or _DEFAULT_NAMESPACE_PREFIX in name


def _is_qualified_name(value: str) -> bool:
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix or len(prefix) > 253 or not _DNS1123_SUBDOMAIN.fullmatch(prefix):
            return False
    else:
        return False
    return 0 < len(name) <= 63 and _QUALIFIED_NAME.fullmatch(name) is not None


def is_extended_resource_name(name: str) -> bool:
    """True for vendor resources such as ``nvidia.com/gpu``."""
    if _is_native_resource(name) or name.startswith(_REQUESTS_PREFIX):
        return False
    return _is_qualified_name(_REQUESTS_PREFIX + name)


def _labels_to_prometheus(labels: dict[str, str]) -> tuple[list[str], list[str]]:
    ordered = sorted(labels)
    return (
        [f"label_{sanitize_label_name(key)}" for key in ordered],
        [labels[key] for key in ordered],
    )


def create_label_keys_values(
    labels: dict[str, str], allow_labels: Sequence[str] | None
) -> tuple[list[str], list[str]]:
    """Turn object labels into metric label keys and values, keeping only allowed ones.

    A wildcard as the first allowed entry lets every label through.
    """
    if not allow_labels:
        return [], []
    if allow_labels[0] == LABEL_WILDCARD:
        return _labels_to_prometheus(labels)
    allowed = {key: labels[key] for key in allow_labels if key in labels}
    return _labels_to_prometheus(allowed)


def condition_metrics(status: ConditionStatus | str) -> list[Metric]:
    """One metric each for the true, false and unknown condition states."""
    return [
        Metric(["condition"], [label], bool_float(status == state))
        for label, state in (
            ("true", ConditionStatus.TRUE),
            ("false", ConditionStatus.FALSE),
            ("unknown", ConditionStatus.UNKNOWN),
        )
    ]


def owner_metrics(owners: Iterable[OwnerReference]) -> list[Metric]:
    """Owner kind, name and controller flag for each owner, or ``<none>`` if there are none."""
    keys = ["owner_kind", "owner_name", "owner_is_controller"]
    metrics = [
        Metric(
            list(keys),
            [
                owner.kind,
                owner.name,
                "false" if owner.controller is None else str(owner.controller).lower(),
            ],
            1,
        )
        for owner in owners
    ]
    return metrics or [Metric(list(keys), ["<none>", "<none>", "<none>"], 1)]


def get_controller_of(meta: ObjectMeta) -> OwnerReference | None:
    """The owner reference marked as controller, if any."""
    return next((ref for ref in meta.owner_references if ref.controller), None)


def wrap_object_func(
    default_keys: Sequence[str],
    label_values_of: Callable[[Any], Sequence[str]],
    func: Callable[[Any], Family],
) -> Callable[[Any], Family]:
    """Wrap a family function so every metric starts with the object's identifying labels."""

    def wrapped(obj: Any) -> Family:
        family = func(obj)
        prefix_values = list(label_values_of(obj))
        return Family(
            [
                Metric(
                    [*default_keys, *metric.label_keys],
                    [*prefix_values, *metric.label_values],
                    metric.value,
                )
                for metric in family.metrics
            ]
        )

    return wrapped