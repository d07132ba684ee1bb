# capx-api

Python models for the infrastructure resources of the Nutanix Cluster API
provider (API group `infrastructure.cluster.x-k8s.io`). The package covers the
`NutanixCluster`, `NutanixMachine` and `NutanixMachineTemplate` kinds and
their lists, in both the `v1beta1` (hub, storage) and `v1alpha4` API
versions. It also provides the condition types and reasons the provider
reports, and converts objects between the two versions.

## Installation

```
pip install capx-api
```

The package has no runtime dependencies.

## Modules

- `capx_api.meta`: `GroupVersion` (with `api_version()` and
  `GroupVersion.parse()`), the constants `GROUP_NAME`, `VERSION`, `V1BETA1`
  and `V1ALPHA4`, and the shared building blocks `ObjectMeta`, `ListMeta`,
  `APIEndpoint`, `MachineAddress`, `ObjectReference`, `FailureDomainSpec` and
  `PrismEndpoint`.
- `capx_api.conditions`: `Condition`, `ConditionStatus` and
  `ConditionSeverity`, constants for the provider's condition types and
  reasons (for example `VM_PROVISIONED_CONDITION` and
  `PROJECT_ASSIGNATION_FAILED`), and `find_condition(conditions, type)`,
  which returns the first matching condition or `None`.
- `capx_api.v1beta1`: the hub version of the resources, including GPU devices
  (`NutanixGPU`), the identifier and boot-type enums, and the finalizer and
  category constants.
- `capx_api.v1alpha4`: the older API version, without GPUs.
- `capx_api.conversion`: `cluster_to_hub` / `cluster_from_hub`,
  `machine_to_hub` / `machine_from_hub`,
  `machine_template_to_hub` / `machine_template_from_hub`, and a `_list_`
  variant of each. Passing an object of the wrong type raises
  `ConversionError`.

Every model has `to_dict()`, which gives a JSON-ready mapping using the
Kubernetes field names; top-level objects carry `apiVersion` and `kind`.
Each model also has a `from_dict()` class method that builds the model from
such a mapping. `from_dict()` raises `ValueError` for a wrong `apiVersion` or
`kind`, an unknown enum value, or a missing required field, and `TypeError`
where a mapping is expected but something else is given. Failure domains are
checked on construction: the name must be non-empty, at most 64 characters
and match the allowed pattern, and at least one subnet is required.

## Example

```python
import json

from capx_api import v1alpha4
from capx_api.conversion import machine_template_to_hub, machine_template_from_hub

with open("template.json") as fh:
    old = v1alpha4.NutanixMachineTemplate.from_dict(json.load(fh))

hub = machine_template_to_hub(old)
print(hub.to_dict()["apiVersion"])  # infrastructure.cluster.x-k8s.io/v1beta1

back = machine_template_from_hub(hub)
```

When a template is converted down from the hub, the hub object (without its
metadata) is stored as JSON in the `cluster.x-k8s.io/conversion-data`
annotation of the result (`CONVERSION_DATA_ANNOTATION`).

## What the package does not do

- It does not talk to a Kubernetes API server or to Prism Central; it only
  models, validates and converts objects in memory.
- It contains no controller or reconciler.
- Up-conversion does not read the conversion-data annotation back, so fields
  that `v1alpha4` cannot hold, such as GPUs, are lost on a round trip through
  `v1alpha4`. `machine_from_hub` drops GPUs as well.

## Running the tests

```
pip install -e .[test]
pytest
```