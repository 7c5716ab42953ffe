# kubestate

`kubestate` turns snapshots of Kubernetes objects into Prometheus metric
families, rendered in the text exposition format. It covers replica sets,
replication controllers, pod disruption budgets and resource quotas. For pods,
it covers containers, init containers, resource requests and limits, and
overhead.

Objects are plain dataclasses. You build them yourself from whatever source you
have, such as a watch stream, a JSON dump or a test fixture. The package then
produces the metric lines for them.

## Installation

```
pip install kubestate
```

The package has no runtime dependencies. To install pytest for the test suite,
use the `test` extra: `pip install kubestate[test]`.

## Usage

Each resource module provides a list of `FamilyGenerator`s. The function
`kubestate.metric.compose_metric_gen_funcs` combines them into one callable.
That callable takes a single object and returns one rendered block of text per
family, in the order of the generators. A family with no samples renders as an
empty string. `extract_metric_family_headers` returns the `# HELP` and `# TYPE`
lines for each family.

```python
from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers
from kubestate.meta import ObjectMeta
from kubestate.replicaset import (
    ReplicaSet,
    ReplicaSetSpec,
    ReplicaSetStatus,
    replica_set_metric_families,
)

families = replica_set_metric_families(None)
generate = compose_metric_gen_funcs(families)

rs = ReplicaSet(
    metadata=ObjectMeta(name="rs1", namespace="ns1", generation=21),
    spec=ReplicaSetSpec(replicas=5),
    status=ReplicaSetStatus(replicas=5, ready_replicas=5),
)

for header in extract_metric_family_headers(families):
    print(header)
for block in generate(rs):
    print(block, end="")
```

The generators for each resource are:

| Module | Generators |
| --- | --- |
| `kubestate.replicaset` | `replica_set_metric_families(allow_labels)` |
| `kubestate.replicationcontroller` | `replication_controller_metric_families()` |
| `kubestate.poddisruptionbudget` | `pod_disruption_budget_metric_families()` |
| `kubestate.resourcequota` | `resource_quota_metric_families()` |
| `kubestate.pod_containers` | `container_status_families()`, `init_container_status_families()` |
| `kubestate.pod_resources` | `container_resource_families()`, `init_container_resource_families()`, `overhead_families()` |

The pod object model (`Pod`, `PodSpec`, `PodStatus`, `Container`,
`ContainerStatus` and so on) lives in `kubestate.pod_model`. Every pod metric
carries `namespace`, `pod` and `uid` labels. `wrap_pod_func` adds those labels
to a family function of your own.

### Building blocks

- `kubestate.metric`: `Metric`, `Family`, `FamilyGenerator`, `MetricType`, and
  `format_value`, which writes sample values such as `1.5e+09` or `0.2`.
- `kubestate.meta`: `ObjectMeta`, `OwnerReference`, `ConditionStatus`, and
  helpers such as `sanitize_label_name`, `create_label_keys_values`,
  `condition_metrics`, `owner_metrics`, `get_controller_of` and
  `wrap_object_func`.

### Label allow-lists

By default, `kube_replicaset_labels` exposes no Kubernetes labels. Pass an
allow-list of label names to expose only those names. If the first entry of the
list is `"*"`, every label is exposed. Each exposed label name is sanitised into
a valid Prometheus label name and given the `label_` prefix. The exposed labels
are sorted by name.

### Quantities

Resource amounts use Kubernetes quantity notation, such as `"200m"`, `"100M"`,
`"2.1G"` or `"1Gi"`. Parse them with `kubestate.quantity.parse_quantity`. A
string that is not a valid quantity raises `QuantityError`.

```python
from kubestate.quantity import parse_quantity

parse_quantity("200m").milli_value()  # 200
parse_quantity("100M").value()        # 100000000
```

## What it does not do

- It does not connect to a cluster, list or watch objects, or serve metrics
  over HTTP. You supply the objects and decide where the text goes.
- For pods, it provides only the container, init container, resource and
  overhead families listed above. It has no families for a pod's phase,
  readiness, scheduling, status reason, creation, deletion or start time, info,
  owner, restart policy, runtime class, volumes or labels. It also has no single
  list of all pod generators.