import re
from datetime import datetime, timezone

import pytest

from kubestate.meta import ObjectMeta, OwnerReference
from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers
from kubestate.replicationcontroller import (
    ReplicationController,
    ReplicationControllerSpec,
    ReplicationControllerStatus,
    replication_controller_metric_families,
)

PREFIX = "kube_replicationcontroller_"

_LINE = re.compile(r"^([A-Za-z_:][A-Za-z0-9_:]*)(?:\{(.*)\})? (\S+)$")
_PAIR = re.compile(r'([A-Za-z_][A-Za-z0-9_]*)="((?:[^"\\]|\\.)*)"')

FAMILY_HELP = [
    ("created", "Unix creation timestamp"),
    ("metadata_generation", "Sequence number representing a specific generation of the desired state."),
    ("owner", "Information about the ReplicationController's owner."),
    ("status_replicas", "The number of replicas per ReplicationController."),
    ("status_fully_labeled_replicas", "The number of fully labeled replicas per ReplicationController."),
    ("status_available_replicas", "The number of available replicas per ReplicationController."),
    ("status_ready_replicas", "The number of ready replicas per ReplicationController."),
    ("status_observed_generation", "The generation observed by the ReplicationController controller."),
    ("spec_replicas", "Number of desired pods for a ReplicationController."),
]

_NO_OWNER = ("<none>", "<none>", "<none>")


def _expected_headers():
    lines = []
    for suffix, help_text in FAMILY_HELP:
        lines.append(f"# HELP {PREFIX}{suffix} {help_text}")
        lines.append(f"# TYPE {PREFIX}{suffix} gauge")
    return sorted(lines)


def _canonical(line):
    match = _LINE.match(line.strip())
    assert match, f"unparsable line: {line!r}"
    name, labels, value = match.groups()
    return (name, tuple(sorted(_PAIR.findall(labels or ""))), value)


def _samples(text):
    return sorted(
        _canonical(line)
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    )


def _header_lines(text):
    return sorted(line.strip() for line in text.splitlines() if line.strip().startswith("#"))


def _want(namespace, name, values, owner=_NO_OWNER):
    samples = []
    for suffix, value in values.items():
        labels = {"namespace": namespace, "replicationcontroller": name}
        if suffix == "owner":
            labels.update(zip(("owner_kind", "owner_name", "owner_is_controller"), owner))
        samples.append((PREFIX + suffix, tuple(sorted(labels.items())), value))
    return sorted(samples)


def _generate(obj):
    families = replication_controller_metric_families()
    rendered = "".join(compose_metric_gen_funcs(families)(obj))
    headers = "\n".join(extract_metric_family_headers(families))
    return rendered, headers


CASES = [
    (
        ReplicationController(
            metadata=ObjectMeta(
                name="rc1",
                namespace="ns1",
                creation_timestamp=datetime.fromtimestamp(1500000000, tz=timezone.utc),
                generation=21,
                owner_references=[
                    OwnerReference(kind="DeploymentConfig", name="dc-name", controller=True)
                ],
            ),
            status=ReplicationControllerStatus(
                replicas=5,
                fully_labeled_replicas=10,
                ready_replicas=5,
                available_replicas=3,
                observed_generation=1,
            ),
            spec=ReplicationControllerSpec(replicas=5),
        ),
        _want(
            "ns1",
            "rc1",
            {
                "created": "1.5e+09",
                "metadata_generation": "21",
                "owner": "1",
                "status_replicas": "5",
                "status_observed_generation": "1",
                "status_fully_labeled_replicas": "10",
                "status_ready_replicas": "5",
                "status_available_replicas": "3",
                "spec_replicas": "5",
            },
            owner=("DeploymentConfig", "dc-name", "true"),
        ),
    ),
    (
        ReplicationController(
            metadata=ObjectMeta(name="rc2", namespace="ns2", generation=14),
            status=ReplicationControllerStatus(
                replicas=0,
                fully_labeled_replicas=5,
                ready_replicas=0,
                available_replicas=0,
                observed_generation=5,
            ),
            spec=ReplicationControllerSpec(replicas=0),
        ),
        _want(
            "ns2",
            "rc2",
            {
                "metadata_generation": "14",
                "owner": "1",
                "status_replicas": "0",
                "status_observed_generation": "5",
                "status_fully_labeled_replicas": "5",
                "status_ready_replicas": "0",
                "status_available_replicas": "0",
                "spec_replicas": "0",
            },
        ),
    ),
    (
        ReplicationController(
            metadata=ObjectMeta(
                name="rc3",
                namespace="ns3",
                generation=5,
                owner_references=[
                    OwnerReference(kind="DeploymentConfig", name="dc-test", controller=None)
                ],
            ),
            status=ReplicationControllerStatus(
                replicas=1,
                fully_labeled_replicas=5,
                ready_replicas=2,
                available_replicas=1,
                observed_generation=1,
            ),
            spec=ReplicationControllerSpec(replicas=0),
        ),
        _want(
            "ns3",
            "rc3",
            {
                "metadata_generation": "5",
                "owner": "1",
                "status_replicas": "1",
                "status_observed_generation": "1",
                "status_fully_labeled_replicas": "5",
                "status_ready_replicas": "2",
                "status_available_replicas": "1",
                "spec_replicas": "0",
            },
            owner=("DeploymentConfig", "dc-test", "false"),
        ),
    ),
]


@pytest.mark.parametrize("obj, want", CASES)
def test_replication_controller_store(obj, want):
    rendered, headers = _generate(obj)
    assert _samples(rendered) == want
    assert _header_lines(headers) == _expected_headers()


def test_family_count():
    assert len(replication_controller_metric_families()) == 9


def test_spec_replicas_absent_emits_nothing():
    rc = ReplicationController(metadata=ObjectMeta(name="rc4", namespace="ns4"))
    rendered, _ = _generate(rc)
    names = {sample[0] for sample in _samples(rendered)}
    assert PREFIX + "spec_replicas" not in names
    assert PREFIX + "status_available_replicas" in names


def test_multiple_owners_each_emitted():
    rc = ReplicationController(
        metadata=ObjectMeta(
            name="rc5",
            namespace="ns5",
            owner_references=[
                OwnerReference(kind="A", name="a", controller=False),
                OwnerReference(kind="B", name="b", controller=True),
            ],
        )
    )
    rendered, _ = _generate(rc)
    owners = [dict(s[1]) for s in _samples(rendered) if s[0] == PREFIX + "owner"]
    assert sorted((o["owner_kind"], o["owner_is_controller"]) for o in owners) == [
        ("A", "false"),
        ("B", "true"),
    ]