"""Conversion of Nutanix resources between v1alpha4 and the v1beta1 hub version."""

from __future__ import annotations

import copy
import json
from typing import Any

from . import v1alpha4, v1beta1
from .meta import ObjectMeta

CONVERSION_DATA_ANNOTATION = "cluster.x-k8s.io/conversion-data"
"""Annotation that keeps the full hub object on a down-converted resource."""


class ConversionError(TypeError):
    """Raised when an object cannot be converted between API versions."""


def _expect(obj: Any, cls: type, what: str) -> None:
    if not isinstance(obj, cls):
        raise ConversionError(
            f"expected {cls.__module__}.{cls.__qualname__} for {what}, "
            f"got {type(obj).__module__}.{type(obj).__qualname__}"
        )


def _identifier(src: Any, target: Any) -> Any:
    if src is None:
        return None
    return target.NutanixResourceIdentifier(type=src.type.value, uuid=src.uuid, name=src.name)


def _category(src: Any, target: Any) -> Any:
    return target.NutanixCategoryIdentifier(key=src.key, value=src.value)


def _failure_domain(src: Any, target: Any) -> Any:
    return target.NutanixFailureDomain(
        name=src.name,
        cluster=_identifier(src.cluster, target),
        subnets=[_identifier(subnet, target) for subnet in src.subnets],
        control_plane=src.control_plane,
    )


def _cluster_spec(src: Any, target: Any) -> Any:
    return target.NutanixClusterSpec(
        control_plane_endpoint=copy.deepcopy(src.control_plane_endpoint),
        prism_central=copy.deepcopy(src.prism_central),
        failure_domains=[_failure_domain(fd, target) for fd in src.failure_domains],
    )


def _cluster_status(src: Any, target: Any) -> Any:
    return target.NutanixClusterStatus(
        ready=src.ready,
        failure_domains=copy.deepcopy(src.failure_domains),
        conditions=copy.deepcopy(src.conditions),
        failure_reason=src.failure_reason,
        failure_message=src.failure_message,
    )


def _machine_spec(src: Any, target: Any) -> Any:
    return target.NutanixMachineSpec(
        image=_identifier(src.image, target),
        provider_id=src.provider_id,
        vcpus_per_socket=src.vcpus_per_socket,
        vcpu_sockets=src.vcpu_sockets,
        memory_size=src.memory_size,
        cluster=_identifier(src.cluster, target),
        subnets=[_identifier(subnet, target) for subnet in src.subnets],
        additional_categories=[_category(c, target) for c in src.additional_categories],
        project=_identifier(src.project, target),
        boot_type=None if src.boot_type is None else src.boot_type.value,
        system_disk_size=src.system_disk_size,
        bootstrap_ref=copy.deepcopy(src.bootstrap_ref),
    )


def _machine_status(src: Any, target: Any) -> Any:
    return target.NutanixMachineStatus(
        ready=src.ready,
        addresses=copy.deepcopy(src.addresses),
        vm_uuid=src.vm_uuid,
        node_ref=copy.deepcopy(src.node_ref),
        conditions=copy.deepcopy(src.conditions),
        failure_reason=src.failure_reason,
        failure_message=src.failure_message,
    )


def _template(src: Any, target: Any) -> Any:
    resource = src.spec.template
    return target.NutanixMachineTemplate(
        spec=target.NutanixMachineTemplateSpec(
            template=target.NutanixMachineTemplateResource(
                spec=_machine_spec(resource.spec, target),
                metadata=copy.deepcopy(resource.metadata),
            )
        ),
        metadata=copy.deepcopy(src.metadata),
    )


def _cluster(src: Any, target: Any) -> Any:
    return target.NutanixCluster(
        metadata=copy.deepcopy(src.metadata),
        spec=_cluster_spec(src.spec, target),
        status=_cluster_status(src.status, target),
    )


def _machine(src: Any, target: Any) -> Any:
    return target.NutanixMachine(
        spec=_machine_spec(src.spec, target),
        metadata=copy.deepcopy(src.metadata),
        status=_machine_status(src.status, target),
    )


def _marshal_hub(hub: v1beta1.NutanixMachineTemplate, meta: ObjectMeta) -> None:
    data = hub.to_dict()
    data.pop("metadata", None)
    try:
        encoded = json.dumps(data, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"cannot preserve hub data: {exc}") from exc
    meta.annotations[CONVERSION_DATA_ANNOTATION] = encoded


def cluster_to_hub(cluster: v1alpha4.NutanixCluster) -> v1beta1.NutanixCluster:
    """Convert a v1alpha4 NutanixCluster to the v1beta1 hub version."""
    _expect(cluster, v1alpha4.NutanixCluster, "cluster")
    return _cluster(cluster, v1beta1)


def cluster_from_hub(hub: v1beta1.NutanixCluster) -> v1alpha4.NutanixCluster:
    """Convert a v1beta1 NutanixCluster to v1alpha4."""
    _expect(hub, v1beta1.NutanixCluster, "hub cluster")
    return _cluster(hub, v1alpha4)


def cluster_list_to_hub(cluster_list: v1alpha4.NutanixClusterList) -> v1beta1.NutanixClusterList:
    """Convert a v1alpha4 NutanixClusterList to the v1beta1 hub version."""
    _expect(cluster_list, v1alpha4.NutanixClusterList, "cluster list")
    return v1beta1.NutanixClusterList(
        items=[_cluster(item, v1beta1) for item in cluster_list.items],
        metadata=copy.deepcopy(cluster_list.metadata),
    )


def cluster_list_from_hub(hub: v1beta1.NutanixClusterList) -> v1alpha4.NutanixClusterList:
    """Convert a v1beta1 NutanixClusterList to v1alpha4."""
    _expect(hub, v1beta1.NutanixClusterList, "hub cluster list")
    return v1alpha4.NutanixClusterList(
        items=[_cluster(item, v1alpha4) for item in hub.items],
        metadata=copy.deepcopy(hub.metadata),
    )


def machine_to_hub(machine: v1alpha4.NutanixMachine) -> v1beta1.NutanixMachine:
    """Convert a v1alpha4 NutanixMachine to the v1beta1 hub version."""
    _expect(machine, v1alpha4.NutanixMachine, "machine")
    return _machine(machine, v1beta1)


def machine_from_hub(hub: v1beta1.NutanixMachine) -> v1alpha4.NutanixMachine:
    """Convert a v1beta1 NutanixMachine to v1alpha4; GPUs have no place there."""
    _expect(hub, v1beta1.NutanixMachine, "hub machine")
    return _machine(hub, v1alpha4)


def machine_list_to_hub(machine_list: v1alpha4.NutanixMachineList) -> v1beta1.NutanixMachineList:
    """Convert a v1alpha4 NutanixMachineList to the v1beta1 hub version."""
    _expect(machine_list, v1alpha4.NutanixMachineList, "machine list")
    return v1beta1.NutanixMachineList(
        items=[_machine(item, v1beta1) for item in machine_list.items],
        metadata=copy.deepcopy(machine_list.metadata),
    )


def machine_list_from_hub(hub: v1beta1.NutanixMachineList) -> v1alpha4.NutanixMachineList:
    """Convert a v1beta1 NutanixMachineList to v1alpha4."""
    _expect(hub, v1beta1.NutanixMachineList, "hub machine list")
    return v1alpha4.NutanixMachineList(
        items=[_machine(item, v1alpha4) for item in hub.items],
        metadata=copy.deepcopy(hub.metadata),
    )


def machine_template_to_hub(
    template: v1alpha4.NutanixMachineTemplate,
) -> v1beta1.NutanixMachineTemplate:
    """Convert a v1alpha4 NutanixMachineTemplate to the v1beta1 hub version."""
    _expect(template, v1alpha4.NutanixMachineTemplate, "machine template")
    return _template(template, v1beta1)


def machine_template_from_hub(
    hub: v1beta1.NutanixMachineTemplate,
) -> v1alpha4.NutanixMachineTemplate:
    """Convert a v1beta1 NutanixMachineTemplate to v1alpha4, keeping the hub data.

    The full hub object, without its metadata, is stored as JSON under
    CONVERSION_DATA_ANNOTATION on the result.
    """
    _expect(hub, v1beta1.NutanixMachineTemplate, "hub machine template")
    result = _template(hub, v1alpha4)
    _marshal_hub(hub, result.metadata)
    return result


def machine_template_list_to_hub(
    template_list: v1alpha4.NutanixMachineTemplateList,
) -> v1beta1.NutanixMachineTemplateList:
    """Convert a v1alpha4 NutanixMachineTemplateList to the v1beta1 hub version."""
    _expect(template_list, v1alpha4.NutanixMachineTemplateList, "machine template list")
    return v1beta1.NutanixMachineTemplateList(
        items=[_template(item, v1beta1) for item in template_list.items],
        metadata=copy.deepcopy(template_list.metadata),
    )


def machine_template_list_from_hub(
    hub: v1beta1.NutanixMachineTemplateList,
) -> v1alpha4.NutanixMachineTemplateList:
    """Convert a v1beta1 NutanixMachineTemplateList to v1alpha4."""
    _expect(hub, v1beta1.NutanixMachineTemplateList, "hub machine template list")
    return v1alpha4.NutanixMachineTemplateList(
        items=[_template(item, v1alpha4) for item in hub.items],
        metadata=copy.deepcopy(hub.metadata),
    )