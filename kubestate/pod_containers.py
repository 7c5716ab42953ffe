"""Metric families describing the containers and init containers of pods."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from kubestate.meta import bool_float, unix_seconds
from kubestate.metric import Family, FamilyGenerator, Metric, MetricType
from kubestate.pod_model import ContainerStatus, Pod, wrap_pod_func

__all__ = ["container_status_families", "init_container_status_families"]

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

StatusesOf = Callable[[Pod], list[ContainerStatus]]


def _regular(pod: Pod) -> list[ContainerStatus]:
    return pod.status.container_statuses


def _init(pod: Pod) -> list[ContainerStatus]:
    return pod.status.init_container_statuses


def _generator(
    name: str, help_text: str, func: Callable[[Pod], Family], kind: MetricType = MetricType.GAUGE
) -> FamilyGenerator:
    return FamilyGenerator(name, help_text, kind, wrap_pod_func(func))


def _info(of: StatusesOf) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        return Family(
            [
                Metric(
                    ["container", "image", "image_id", "container_id"],
                    [cs.name, cs.image, cs.image_id, cs.container_id],
                    1,
                )
                for cs in of(pod)
            ]
        )

    return build


def _per_container(of: StatusesOf, value: Callable[[ContainerStatus], float]) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        return Family([Metric(["container"], [cs.name], value(cs)) for cs in of(pod)])

    return build


def _reason(
    of: StatusesOf, reason_of: Callable[[ContainerStatus], str | None]
) -> Callable[[Pod], Family]:
    def build(pod: Pod) -> Family:
        metrics = []
        for cs in of(pod):
            reason = reason_of(cs)
            if reason is not None:
                metrics.append(Metric(["container", "reason"], [cs.name, reason], 1))
        return Family(metrics)

    return build


def _last_terminated_reason(cs: ContainerStatus) -> str | None:
    terminated = cs.last_termination_state.terminated
    return None if terminated is None else terminated.reason


def _terminated_reason(cs: ContainerStatus) -> str | None:
    terminated = cs.state.terminated
    return None if terminated is None else terminated.reason


def _waiting_reason(cs: ContainerStatus) -> str | None:
    waiting = cs.state.waiting
    return None if waiting is None else waiting.reason


def _state_started(pod: Pod) -> Family:
    return Family(
        [
            Metric(
                ["container"],
                [cs.name],
                float(unix_seconds(cs.state.running.started_at or _ZERO_TIME)),
            )
            for cs in pod.status.container_statuses
            if cs.state.running is not None
        ]
    )


def container_status_families() -> list[FamilyGenerator]:
    """Generators for the information and status of regular containers."""
    of = _regular
    return [
        _generator(
            "kube_pod_container_info",
            "Information about a container in a pod.",
            _info(of),
        ),
        _generator(
            "kube_pod_container_state_started",
            "Start time in unix timestamp for a pod container.",
            _state_started,
        ),
        _generator(
            "kube_pod_container_status_last_terminated_reason",
            "Describes the last reason the container was in terminated state.",
            _reason(of, _last_terminated_reason),
        ),
        _generator(
            "kube_pod_container_status_ready",
            "Describes whether the containers readiness check succeeded.",
            _per_container(of, lambda cs: bool_float(cs.ready)),
        ),
        _generator(
            "kube_pod_container_status_restarts_total",
            "The number of container restarts per container.",
            _per_container(of, lambda cs: float(cs.restart_count)),
            MetricType.COUNTER,
        ),
        _generator(
            "kube_pod_container_status_running",
            "Describes whether the container is currently in running state.",
            _per_container(of, lambda cs: bool_float(cs.state.running is not None)),
        ),
        _generator(
            "kube_pod_container_status_terminated",
            "Describes whether the container is currently in terminated state.",
            _per_container(of, lambda cs: bool_float(cs.state.terminated is not None)),
        ),
        _generator(
            "kube_pod_container_status_terminated_reason",
            "Describes the reason the container is currently in terminated state.",
            _reason(of, _terminated_reason),
        ),
        _generator(
            "kube_pod_container_status_waiting",
            "Describes whether the container is currently in waiting state.",
            _per_container(of, lambda cs: bool_float(cs.state.waiting is not None)),
        ),
        _generator(
            "kube_pod_container_status_waiting_reason",
            "Describes the reason the container is currently in waiting state.",
            _reason(of, _waiting_reason),
        ),
    ]


def init_container_status_families() -> list[FamilyGenerator]:
    """Generators for the information and status of init containers."""
    of = _init
    return [
        _generator(
            "kube_pod_init_container_info",
            "Information about an init container in a pod.",
            _info(of),
        ),
        _generator(
            "kube_pod_init_container_status_last_terminated_reason",
            "Describes the last reason the init container was in terminated state.",
            _reason(of, _last_terminated_reason),
        ),
        _generator(
            "kube_pod_init_container_status_ready",
            "Describes whether the init containers readiness check succeeded.",
            _per_container(of, lambda cs: bool_float(cs.ready)),
        ),
        _generator(
            "kube_pod_init_container_status_restarts_total",
            "The number of restarts for the init container.",
            _per_container(of, lambda cs: float(cs.restart_count)),
            MetricType.COUNTER,
        ),
        _generator(
            "kube_pod_init_container_status_running",
            "Describes whether the init container is currently in running state.",
            _per_container(of, lambda cs: bool_float(cs.state.running is not None)),
        ),
        _generator(
            "kube_pod_init_container_status_terminated",
            "Describes whether the init container is currently in terminated state.",
            _per_container(of, lambda cs: bool_float(cs.state.terminated is not None)),
        ),
        _generator(
            "kube_pod_init_container_status_terminated_reason",
            "Describes the reason the init container is currently in terminated state.",
            _reason(of, _terminated_reason),
        ),
        _generator(
            "kube_pod_init_container_status_waiting",
            "Describes whether the init container is currently in waiting state.",
            _per_container(of, lambda cs: bool_float(cs.state.waiting is not None)),
        ),
        _generator(
            "kube_pod_init_container_status_waiting_reason",
            "Describes the reason the init container is currently in waiting state.",
            _reason(of, _waiting_reason),
        ),
    ]