import re
from datetime import datetime, timezone

import pytest

from kubestate.meta import ObjectMeta, OwnerReference
from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers
from kubestate.replicaset import (
    ReplicaSet,
    ReplicaSetSpec,
    ReplicaSetStatus,
    replica_set_metric_families,
)

_LINE = re.compile(r"^([A-Za-z_:][A-Za-z0-9_:]*)(?:\{(.*)\})? (\S+)$")
_PAIR = re.compile(r'([A-Za-z_][A-Za-z0-9_]*)="((?:[^"\\]|\\.)*)"')

METADATA = """
# HELP kube_replicaset_created Unix creation timestamp
# TYPE kube_replicaset_created gauge
# HELP kube_replicaset_metadata_generation Sequence number representing a specific generation of the desired state.
# TYPE kube_replicaset_metadata_generation gauge
# HELP kube_replicaset_status_replicas The number of replicas per ReplicaSet.
# TYPE kube_replicaset_status_replicas gauge
# HELP kube_replicaset_status_fully_labeled_replicas The number of fully labeled replicas per ReplicaSet.
# TYPE kube_replicaset_status_fully_labeled_replicas gauge
# HELP kube_replicaset_status_ready_replicas The number of ready replicas per ReplicaSet.
# TYPE kube_replicaset_status_ready_replicas gauge
# HELP kube_replicaset_status_observed_generation The generation observed by the ReplicaSet controller.
# TYPE kube_replicaset_status_observed_generation gauge
# HELP kube_replicaset_spec_replicas Number of desired pods for a ReplicaSet.
# TYPE kube_replicaset_spec_replicas gauge
# HELP kube_replicaset_owner Information about the ReplicaSet's owner.
# TYPE kube_replicaset_owner gauge
# HELP kube_replicaset_labels Kubernetes labels converted to Prometheus labels.
# TYPE kube_replicaset_labels gauge
"""


def _canonical(line):
    match = _LINE.match(line.strip())
    assert match, f"unparsable line: {line!r}"
    name, labels, value = match.groups()
    pairs = sorted(_PAIR.findall(labels or ""))
    return (name, tuple(pairs), value)


def _samples(text):
    return sorted(
        _canonical(line)
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    )


def _header_lines(text):
    return sorted(line.strip() for line in text.splitlines() if line.strip().startswith("#"))


def _generate(obj, allow_labels=None):
    families = replica_set_metric_families(allow_labels)
    rendered = "".join(compose_metric_gen_funcs(families)(obj))
    headers = "\n".join(extract_metric_family_headers(families))
    return rendered, headers


CASES = [
    (
        ReplicaSet(
            metadata=ObjectMeta(
                name="rs1",
                namespace="ns1",
                creation_timestamp=datetime.fromtimestamp(1500000000, tz=timezone.utc),
                generation=21,
                owner_references=[OwnerReference(kind="Deployment", name="dp-name", controller=True)],
                labels={"app": "example1"},
            ),
            status=ReplicaSetStatus(
                replicas=5, fully_labeled_replicas=10, ready_replicas=5, observed_generation=1
            ),
            spec=ReplicaSetSpec(replicas=5),
        ),
        """
        kube_replicaset_labels{replicaset="rs1",namespace="ns1"} 1
        kube_replicaset_created{namespace="ns1",replicaset="rs1"} 1.5e+09
        kube_replicaset_metadata_generation{namespace="ns1",replicaset="rs1"} 21
        kube_replicaset_status_replicas{namespace="ns1",replicaset="rs1"} 5
        kube_replicaset_status_observed_generation{namespace="ns1",replicaset="rs1"} 1
        kube_replicaset_status_fully_labeled_replicas{namespace="ns1",replicaset="rs1"} 10
        kube_replicaset_status_ready_replicas{namespace="ns1",replicaset="rs1"} 5
        kube_replicaset_spec_replicas{namespace="ns1",replicaset="rs1"} 5
        kube_replicaset_owner{namespace="ns1",owner_is_controller="true",owner_kind="Deployment",owner_name="dp-name",replicaset="rs1"} 1
        """,
    ),
    (
        ReplicaSet(
            metadata=ObjectMeta(
                name="rs2",
                namespace="ns2",
                generation=14,
                labels={"app": "example2", "env": "ex"},
            ),
            status=ReplicaSetStatus(
                replicas=0, fully_labeled_replicas=5, ready_replicas=0, observed_generation=5
            ),
            spec=ReplicaSetSpec(replicas=0),
        ),
        """
        kube_replicaset_labels{replicaset="rs2",namespace="ns2"} 1
        kube_replicaset_metadata_generation{namespace="ns2",replicaset="rs2"} 14
        kube_replicaset_status_replicas{namespace="ns2",replicaset="rs2"} 0
        kube_replicaset_status_observed_generation{namespace="ns2",replicaset="rs2"} 5
        kube_replicaset_status_fully_labeled_replicas{namespace="ns2",replicaset="rs2"} 5
        kube_replicaset_status_ready_replicas{namespace="ns2",replicaset="rs2"} 0
        kube_replicaset_spec_replicas{namespace="ns2",replicaset="rs2"} 0
        kube_replicaset_owner{namespace="ns2",owner_is_controller="<none>",owner_kind="<none>",owner_name="<none>",replicaset="rs2"} 1
        """,
    ),
]


@pytest.mark.parametrize("obj, want", CASES)
def test_replica_set_store(obj, want):
    rendered, headers = _generate(obj)
    assert _samples(rendered) == _samples(want)
    assert _header_lines(headers) == _header_lines(METADATA)


def test_family_order_and_count():
    names = [gen.name for gen in replica_set_metric_families(None)]
    assert names == [
        "kube_replicaset_created",
        "kube_replicaset_status_replicas",
        "kube_replicaset_status_fully_labeled_replicas",
        "kube_replicaset_status_ready_replicas",
        "kube_replicaset_status_observed_generation",
        "kube_replicaset_spec_replicas",
        "kube_replicaset_metadata_generation",
        "kube_replicaset_owner",
        "kube_replicaset_labels",
    ]


def test_spec_replicas_absent_emits_nothing():
    rs = ReplicaSet(metadata=ObjectMeta(name="rs3", namespace="ns3"))
    rendered, _ = _generate(rs)
    names = {sample[0] for sample in _samples(rendered)}
    assert "kube_replicaset_spec_replicas" not in names
    assert "kube_replicaset_created" not in names
    assert "kube_replicaset_status_replicas" in names


def test_labels_with_wildcard_are_exposed():
    rs = ReplicaSet(
        metadata=ObjectMeta(name="rs1", namespace="ns1", labels={"app": "example1", "env": "ex"})
    )
    rendered, _ = _generate(rs, ["*"])
    labels = [s for s in _samples(rendered) if s[0] == "kube_replicaset_labels"]
    assert labels == [
        (
            "kube_replicaset_labels",
            (
                ("label_app", "example1"),
                ("label_env", "ex"),
                ("namespace", "ns1"),
                ("replicaset", "rs1"),
            ),
            "1",
        )
    ]


def test_labels_with_allow_list_filters():
    rs = ReplicaSet(
        metadata=ObjectMeta(name="rs1", namespace="ns1", labels={"app": "example1", "env": "ex"})
    )
    rendered, _ = _generate(rs, ["env"])
    labels = [s for s in _samples(rendered) if s[0] == "kube_replicaset_labels"]
    assert labels[0][1] == (("label_env", "ex"), ("namespace", "ns1"), ("replicaset", "rs1"))


def test_owner_without_controller_flag_is_false():
    rs = ReplicaSet(
        metadata=ObjectMeta(
            name="rs1",
            namespace="ns1",
            owner_references=[OwnerReference(kind="Deployment", name="dp", controller=None)],
        )
    )
    rendered, _ = _generate(rs)
    owners = [s for s in _samples(rendered) if s[0] == "kube_replicaset_owner"]
    assert dict(owners[0][1])["owner_is_controller"] == "false"