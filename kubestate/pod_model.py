"""The pod object model and the wrapper that labels pod metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from kubestate.meta import ConditionStatus, ObjectMeta, wrap_object_func
from kubestate.metric import Family
from kubestate.quantity import Quantity

__all__ = [
    "ContainerStateRunning",
    "ContainerStateTerminated",
    "ContainerStateWaiting",
    "ContainerState",
    "ContainerStatus",
    "ResourceRequirements",
    "Container",
    "PodCondition",
    "PersistentVolumeClaimVolumeSource",
    "Volume",
    "PodSpec",
    "PodStatus",
    "Pod",
    "POD_DEFAULT_LABELS",
    "wrap_pod_func",
]

POD_DEFAULT_LABELS = ("namespace", "pod", "uid")


@dataclass
class ContainerStateRunning:
    """A container that is running."""

    started_at: datetime | None = None


@dataclass
class ContainerStateTerminated:
    """A container that has terminated."""

    reason: str = ""
    finished_at: datetime | None = None


@dataclass
class ContainerStateWaiting:
    """A container that is waiting to start."""

    reason: str = ""


@dataclass
class ContainerState:
    """The state of a container; at most one member is set."""

    running: ContainerStateRunning | None = None
    terminated: ContainerStateTerminated | None = None
    waiting: ContainerStateWaiting | None = None


@dataclass
class ContainerStatus:
    """Observed status of one container of a pod."""

    name: str = ""
    image: str = ""
    image_id: str = ""
    container_id: str = ""
    ready: bool = False
    restart_count: int = 0
    state: ContainerState = field(default_factory=ContainerState)
    last_termination_state: ContainerState = field(default_factory=ContainerState)


@dataclass
class ResourceRequirements:
    """Resource requests and limits of a container, keyed by resource name."""

    requests: dict[str, Quantity] = field(default_factory=dict)
    limits: dict[str, Quantity] = field(default_factory=dict)


@dataclass
class Container:
    """A container declared in a pod spec."""

    name: str = ""
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)


@dataclass
class PodCondition:
    """A condition reported in a pod's status."""

    type: str = ""
    status: ConditionStatus | str = ""
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""


@dataclass
class PersistentVolumeClaimVolumeSource:
    """A volume backed by a persistent volume claim."""

    claim_name: str = ""
    read_only: bool = False


@dataclass
class Volume:
    """A volume declared in a pod spec."""

    name: str = ""
    persistent_volume_claim: PersistentVolumeClaimVolumeSource | None = None


@dataclass
class PodSpec:
    """Desired state of a pod."""

    node_name: str = ""
    priority_class_name: str = ""
    host_network: bool = False
    restart_policy: str = ""
    runtime_class_name: str | None = None
    containers: list[Container] = field(default_factory=list)
    init_containers: list[Container] = field(default_factory=list)
    volumes: list[Volume] = field(default_factory=list)
    overhead: dict[str, Quantity] | None = None


@dataclass
class PodStatus:
    """Observed state of a pod."""

    phase: str = ""
    reason: str = ""
    host_ip: str = ""
    pod_ip: str = ""
    start_time: datetime | None = None
    conditions: list[PodCondition] = field(default_factory=list)
    container_statuses: list[ContainerStatus] = field(default_factory=list)
    init_container_statuses: list[ContainerStatus] = field(default_factory=list)


@dataclass
class Pod:
    """A pod object."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PodSpec = field(default_factory=PodSpec)
    status: PodStatus = field(default_factory=PodStatus)


def wrap_pod_func(func: Callable[[Pod], Family]) -> Callable[[Pod], Family]:
    """Wrap a family function so every metric starts with namespace, pod and uid labels."""
    return wrap_object_func(
        POD_DEFAULT_LABELS,
        lambda pod: (pod.metadata.namespace, pod.metadata.name, pod.metadata.uid),
        func,
    )