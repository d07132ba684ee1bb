from datetime import datetime, timezone

import pytest

from capx_api import v1beta1
from capx_api.conditions import (
    PROJECT_ASSIGNATION_FAILED,
    PROJECT_ASSIGNED_CONDITION,
    Condition,
    ConditionSeverity,
    ConditionStatus,
    find_condition,
)
from capx_api.meta import (
    APIEndpoint,
    FailureDomainSpec,
    ListMeta,
    MachineAddress,
    ObjectMeta,
    ObjectReference,
    PrismEndpoint,
)
from capx_api.v1beta1 import (
    NutanixBootType,
    NutanixCategoryIdentifier,
    NutanixCluster,
    NutanixClusterList,
    NutanixClusterSpec,
    NutanixClusterStatus,
    NutanixFailureDomain,
    NutanixGPU,
    NutanixGPUIdentifierType,
    NutanixIdentifierType,
    NutanixMachine,
    NutanixMachineList,
    NutanixMachineSpec,
    NutanixMachineStatus,
    NutanixMachineTemplate,
    NutanixMachineTemplateList,
    NutanixMachineTemplateResource,
    NutanixMachineTemplateSpec,
    NutanixResourceIdentifier,
)


def _by_name(name):
    return NutanixResourceIdentifier(type="name", name=name)


def _machine_spec():
    return NutanixMachineSpec(
        image=_by_name("rhcos"),
        provider_id="nutanix://vm-1",
        vcpus_per_socket=2,
        vcpu_sockets=1,
        memory_size="4Gi",
        cluster=_by_name("pe-cluster"),
        subnets=[_by_name("subnet-a"), NutanixResourceIdentifier(type="uuid", uuid="abc-123")],
        additional_categories=[NutanixCategoryIdentifier(key="env", value="dev")],
        project=_by_name("proj"),
        boot_type="uefi",
        system_disk_size="40Gi",
        bootstrap_ref=ObjectReference(kind="Secret", name="boot"),
        gpus=[NutanixGPU(type="deviceID", device_id=42), NutanixGPU(type="name", name="gpu-x")],
    )


def _cluster():
    return NutanixCluster(
        metadata=ObjectMeta(name="c1", namespace="ns", finalizers=[v1beta1.NUTANIX_CLUSTER_FINALIZER]),
        spec=NutanixClusterSpec(
            control_plane_endpoint=APIEndpoint(host="10.0.0.1", port=6443),
            prism_central=PrismEndpoint(address="pc.example.com", port=9440),
            failure_domains=[
                NutanixFailureDomain(
                    name="fd-1",
                    cluster=_by_name("pe-cluster"),
                    subnets=[_by_name("subnet-a")],
                    control_plane=True,
                )
            ],
        ),
        status=NutanixClusterStatus(
            ready=True,
            failure_domains={"fd-1": FailureDomainSpec(control_plane=True)},
            conditions=[
                Condition(
                    type=PROJECT_ASSIGNED_CONDITION,
                    status=ConditionStatus.FALSE,
                    severity=ConditionSeverity.ERROR,
                    reason=PROJECT_ASSIGNATION_FAILED,
                    last_transition_time=datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
                )
            ],
            failure_message="boom",
        ),
    )


def test_constants_from_source():
    assert v1beta1.NUTANIX_CLUSTER_KIND == "NutanixCluster"
    assert v1beta1.NUTANIX_MACHINE_KIND == "NutanixMachine"
    assert v1beta1.NUTANIX_MACHINE_TEMPLATE_KIND == "NutanixMachineTemplate"
    assert v1beta1.NUTANIX_CLUSTER_CREDENTIAL_FINALIZER == "nutanixcluster/infrastructure.cluster.x-k8s.io"
    assert v1beta1.DEFAULT_CAPI_CATEGORY_KEY_FOR_NAME == "KubernetesClusterName"
    assert v1beta1.GROUP_VERSION.api_version() == "infrastructure.cluster.x-k8s.io/v1beta1"


def test_enum_values():
    assert NutanixIdentifierType("uuid") is NutanixIdentifierType.UUID
    assert NutanixBootType("legacy") is NutanixBootType.LEGACY
    assert NutanixGPUIdentifierType("deviceID") is NutanixGPUIdentifierType.DEVICE_ID


def test_identifier_coerces_type_and_omits_unset():
    ident = _by_name("subnet-a")
    assert ident.type is NutanixIdentifierType.NAME
    assert ident.to_dict() == {"type": "name", "name": "subnet-a"}


def test_identifier_invalid_type():
    with pytest.raises(ValueError):
        NutanixResourceIdentifier(type="label")


def test_identifier_missing_type():
    with pytest.raises(ValueError):
        NutanixResourceIdentifier.from_dict({"name": "x"})


def test_category_omitempty():
    assert NutanixCategoryIdentifier().to_dict() == {}
    cat = NutanixCategoryIdentifier(key="env", value="dev")
    assert NutanixCategoryIdentifier.from_dict(cat.to_dict()) == cat


def test_gpu_round_trip_and_invalid():
    gpu = NutanixGPU(type="deviceID", device_id=42)
    assert gpu.to_dict() == {"type": "deviceID", "deviceID": 42}
    assert NutanixGPU.from_dict(gpu.to_dict()) == gpu
    with pytest.raises(ValueError):
        NutanixGPU(type="uuid")


@pytest.mark.parametrize("name", ["", "a" * 65, "---"])
def test_failure_domain_bad_name(name):
    with pytest.raises(ValueError):
        NutanixFailureDomain(name=name, cluster=_by_name("pe"), subnets=[_by_name("s")])


def test_failure_domain_needs_subnet():
    with pytest.raises(ValueError):
        NutanixFailureDomain(name="fd", cluster=_by_name("pe"), subnets=[])


def test_failure_domain_missing_cluster():
    with pytest.raises(ValueError):
        NutanixFailureDomain.from_dict({"name": "fd", "subnets": [{"type": "name", "name": "s"}]})


def test_failure_domain_omits_false_control_plane():
    fd = NutanixFailureDomain(name="fd", cluster=_by_name("pe"), subnets=[_by_name("s")])
    assert "controlPlane" not in fd.to_dict()
    assert NutanixFailureDomain.from_dict(fd.to_dict()) == fd


def test_cluster_round_trip():
    cluster = _cluster()
    data = cluster.to_dict()
    assert data["apiVersion"] == v1beta1.GROUP_VERSION.api_version()
    assert data["kind"] == "NutanixCluster"
    assert NutanixCluster.from_dict(data) == cluster


def test_cluster_conditions_found_after_round_trip():
    restored = NutanixCluster.from_dict(_cluster().to_dict())
    cond = find_condition(restored.status.conditions, PROJECT_ASSIGNED_CONDITION)
    assert cond.reason == PROJECT_ASSIGNATION_FAILED
    assert cond.severity is ConditionSeverity.ERROR


def test_empty_cluster_spec_wire_shape():
    data = NutanixClusterSpec().to_dict()
    assert data["prismCentral"] is None
    assert data["failureDomains"] == []
    assert NutanixClusterStatus().to_dict() == {}


def test_cluster_rejects_wrong_kind_and_version():
    with pytest.raises(ValueError):
        NutanixCluster.from_dict({"kind": "NutanixMachine"})
    with pytest.raises(ValueError):
        NutanixCluster.from_dict({"apiVersion": "infrastructure.cluster.x-k8s.io/v1alpha4"})


def test_cluster_list_round_trip():
    lst = NutanixClusterList(items=[_cluster(), NutanixCluster()], metadata=ListMeta(resource_version="7"))
    data = lst.to_dict()
    assert data["kind"] == "NutanixClusterList"
    assert NutanixClusterList.from_dict(data) == lst


def test_machine_spec_round_trip():
    spec = _machine_spec()
    data = spec.to_dict()
    assert data["subnet"][1] == {"type": "uuid", "uuid": "abc-123"}
    assert data["bootType"] == "uefi"
    assert NutanixMachineSpec.from_dict(data) == spec


def test_machine_spec_minimal_wire_shape():
    spec = NutanixMachineSpec(image=_by_name("rhcos"))
    data = spec.to_dict()
    for key in ("cluster", "project", "bootType", "gpus", "additionalCategories", "bootstrapRef"):
        assert key not in data
    assert data["subnet"] == []
    assert NutanixMachineSpec.from_dict(data) == spec


def test_machine_spec_requires_image():
    with pytest.raises(ValueError):
        NutanixMachineSpec.from_dict({"providerID": "x"})


def test_machine_spec_invalid_boot_type():
    with pytest.raises(ValueError):
        NutanixMachineSpec(image=_by_name("rhcos"), boot_type="bios")


def test_machine_status_always_has_ready():
    assert NutanixMachineStatus().to_dict() == {"ready": False}


def test_machine_round_trip():
    machine = NutanixMachine(
        spec=_machine_spec(),
        metadata=ObjectMeta(name="m1", finalizers=[v1beta1.NUTANIX_MACHINE_FINALIZER]),
        status=NutanixMachineStatus(
            ready=True,
            addresses=[MachineAddress(type="InternalIP", address="10.0.0.5")],
            vm_uuid="vm-uuid",
            node_ref=ObjectReference(kind="Node", name="n1"),
            failure_reason="CreateError",
        ),
    )
    data = machine.to_dict()
    assert data["kind"] == "NutanixMachine"
    assert NutanixMachine.from_dict(data) == machine


def test_machine_list_round_trip():
    lst = NutanixMachineList(items=[NutanixMachine(spec=_machine_spec())])
    assert NutanixMachineList.from_dict(lst.to_dict()) == lst


def test_machine_template_round_trip():
    template = NutanixMachineTemplate(
        spec=NutanixMachineTemplateSpec(
            template=NutanixMachineTemplateResource(
                spec=_machine_spec(), metadata=ObjectMeta(labels={"role": "worker"})
            )
        ),
        metadata=ObjectMeta(name="tmpl"),
    )
    data = template.to_dict()
    assert data["kind"] == "NutanixMachineTemplate"
    assert data["spec"]["template"]["metadata"]["labels"] == {"role": "worker"}
    assert NutanixMachineTemplate.from_dict(data) == template


def test_machine_template_requires_template():
    with pytest.raises(ValueError):
        NutanixMachineTemplate.from_dict({"spec": {}})


def test_machine_template_list_round_trip():
    tmpl = NutanixMachineTemplate(
        spec=NutanixMachineTemplateSpec(template=NutanixMachineTemplateResource(spec=_machine_spec()))
    )
    lst = NutanixMachineTemplateList(items=[tmpl, tmpl])
    restored = NutanixMachineTemplateList.from_dict(lst.to_dict())
    assert restored == lst
    assert len(restored.items) == 2


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        NutanixCluster.from_dict(["not", "a", "mapping"])