"""Metric families describing the resources requested by pod containers."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from kubestate.meta import (
    is_attachable_volume_resource_name,
    is_extended_resource_name,
    is_huge_page_resource_name,
    sanitize_label_name,
)
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType
from kubestate.pod_model import Pod, ResourceRequirements, wrap_pod_func
from kubestate.quantity import Quantity

__all__ = ["container_resource_families", "init_container_resource_families", "overhead_families"]

_CPU = "cpu"
_MEMORY = "memory"
_STORAGE = "storage"
_EPHEMERAL_STORAGE = "ephemeral-storage"
_BYTE_RESOURCES = frozenset({_MEMORY, _STORAGE, _EPHEMERAL_STORAGE})

_CONTAINER_KEYS = ("container", "node", "resource", "unit")
_INIT_CONTAINER_KEYS = ("container", "resource", "unit")

Section = Callable[[ResourceRequirements], dict[str, Quantity]]


class _Unit(str, Enum):
    CORE = "core"
    BYTE = "byte"
    INTEGER = "integer"


def _limits(resources: ResourceRequirements) -> dict[str, Quantity]:
    return resources.limits


def _requests(resources: ResourceRequirements) -> dict[str, Quantity]:
    return resources.requests


def _cores(qty: Quantity) -> float:
    return qty.milli_value() / 1000


def _whole(qty: Quantity) -> float:
    return float(qty.value())


def _special_units(resource: str, qty: Quantity) -> list[tuple[_Unit, float]]:
    """Units for huge page, attachable volume and extended resources; each test applies on its own."""
    units = []
    if is_huge_page_resource_name(resource):
        units.append((_Unit.BYTE, _whole(qty)))
    if is_attachable_volume_resource_name(resource):
        units.append((_Unit.BYTE, _whole(qty)))
    if is_extended_resource_name(resource):
        units.append((_Unit.INTEGER, _whole(qty)))
    return units


def _container_units(resource: str, qty: Quantity) -> list[tuple[_Unit, float]]:
    if resource == _CPU:
        return [(_Unit.CORE, _cores(qty))]
    if resource in _BYTE_RESOURCES:
        return [(_Unit.BYTE, _whole(qty))]
    return _special_units(resource, qty)


def _container_resources(section: Section) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        return Family(
            [
                Metric(
                    list(_CONTAINER_KEYS),
                    [container.name, pod.spec.node_name, sanitize_label_name(resource), unit.value],
                    value,
                )
                for container in pod.spec.containers
                for resource, qty in section(container.resources).items()
                for unit, value in _container_units(resource, qty)
            ]
        )

    return build


def _init_container_resources(section: Section) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        return Family(
            [
                Metric(
                    list(_INIT_CONTAINER_KEYS),
                    [container.name, sanitize_label_name(resource), unit.value],
                    value,
                )
                for container in pod.spec.init_containers
                for resource, qty in section(container.resources).items()
                for unit, value in _special_units(resource, qty)
            ]
        )

    return build


def _init_container_single(
    section: Section, resource_name: str, value_of: Callable[[Quantity], float]
) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        return Family(
            [
                Metric(["container"], [container.name], value_of(qty))
                for container in pod.spec.init_containers
                for resource, qty in section(container.resources).items()
                if resource == resource_name
            ]
        )

    return build


def _overhead(resource_name: str, value_of: Callable[[Quantity], float]) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        overhead = pod.spec.overhead or {}
        return Family(
            [Metric(value=value_of(qty)) for resource, qty in overhead.items() if resource == resource_name]
        )

    return build


def _generator(name: str, help_text: str, func: Callable[[Pod], Family]) -> FamilyGenerator:
    return FamilyGenerator(name, help_text, MetricType.GAUGE, wrap_pod_func(func))


def container_resource_families() -> list[FamilyGenerator]:
    """Generators for the resource limits and requests of regular containers."""
    return [
        _generator(
            "kube_pod_container_resource_limits",
            "The number of requested limit resource by a container.",
            _container_resources(_limits),
        ),
        _generator(
            "kube_pod_container_resource_requests",
            "The number of requested request resource by a container.",
            _container_resources(_requests),
        ),
    ]


def init_container_resource_families() -> list[FamilyGenerator]:
    """Generators for the resource limits and requests of init containers."""
    return [
        _generator(
            "kube_pod_init_container_resource_limits_cpu_cores",
            "The number of CPU cores requested limit by an init container.",
            _init_container_single(_limits, _CPU, _cores),
        ),
        _generator(
            "kube_pod_init_container_resource_limits_ephemeral_storage_bytes",
            "Bytes of ephemeral-storage requested limit by an init container.",
            _init_container_single(_limits, _EPHEMERAL_STORAGE, _whole),
        ),
        _generator(
            "kube_pod_init_container_resource_limits",
            "The number of requested limit resource by an init container.",
            _init_container_resources(_limits),
        ),
        _generator(
            "kube_pod_init_container_resource_limits_memory_bytes",
            "Bytes of memory requested limit by an init container.",
            _init_container_single(_limits, _MEMORY, _whole),
        ),
        _generator(
            "kube_pod_init_container_resource_limits_storage_bytes",
            "Bytes of storage requested limit by an init container.",
            _init_container_single(_limits, _STORAGE, _whole),
        ),
        _generator(
            "kube_pod_init_container_resource_requests_cpu_cores",
            "The number of CPU cores requested by an init container.",
            _init_container_single(_requests, _CPU, _cores),
        ),
        _generator(
            "kube_pod_init_container_resource_requests_ephemeral_storage_bytes",
            "Bytes of ephemeral-storage requested by an init container.",
            _init_container_single(_requests, _EPHEMERAL_STORAGE, _whole),
        ),
        _generator(
            "kube_pod_init_container_resource_requests",
            "The number of requested request resource by an init container.",
            _init_container_resources(_requests),
        ),
        _generator(
            "kube_pod_init_container_resource_requests_memory_bytes",
            "Bytes of memory requested by an init container.",
            _init_container_single(_requests, _MEMORY, _whole),
        ),
        _generator(
            "kube_pod_init_container_resource_requests_storage_bytes",
            "Bytes of storage requested by an init container.",
            _init_container_single(_requests, _STORAGE, _whole),
        ),
    ]


def overhead_families() -> list[FamilyGenerator]:
    """Generators for the pod overhead in cpu cores and memory bytes."""
    return [
        _generator(
            "kube_pod_overhead_cpu_cores",
            "The pod overhead in regards to cpu cores associated with running a pod.",
            _overhead(_CPU, _cores),
        ),
        _generator(
            "kube_pod_overhead_memory_bytes",
            "The pod overhead in regards to memory associated with running a pod.",
            _overhead(_MEMORY, _whole),
        ),
    ]