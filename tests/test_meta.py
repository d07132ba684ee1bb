import pytest

from capx_api.meta import (
    GROUP_NAME,
    V1ALPHA4,
    V1BETA1,
    APIEndpoint,
    FailureDomainSpec,
    GroupVersion,
    ListMeta,
    MachineAddress,
    ObjectMeta,
    ObjectReference,
    PrismEndpoint,
)


def test_v1beta1_api_version_string():
    assert V1BETA1.api_version() == "infrastructure.cluster.x-k8s.io/v1beta1"


def test_v1alpha4_shares_group():
    assert V1ALPHA4.api_version() == f"{GROUP_NAME}/v1alpha4"
    parsed = GroupVersion.parse(V1ALPHA4.api_version())
    assert parsed.group == GROUP_NAME
    assert parsed.version == "v1alpha4"


@pytest.mark.parametrize("gv", [V1BETA1, V1ALPHA4, GroupVersion("apps", "v1")])
def test_group_version_round_trip(gv):
    assert GroupVersion.parse(gv.api_version()) == gv


def test_parse_core_version_has_empty_group():
    gv = GroupVersion.parse("v1")
    assert gv.group == ""
    assert gv.api_version() == "v1"


def test_parse_rejects_too_many_slashes():
    with pytest.raises(ValueError):
        GroupVersion.parse("a/b/c")


def test_object_meta_round_trip():
    meta = ObjectMeta(
        name="cluster-a",
        namespace="ns",
        labels={"tier": "cp"},
        annotations={"note": "x"},
        finalizers=["f1"],
        generation=3,
    )
    data = meta.to_dict()
    assert data["name"] == "cluster-a"
    assert data["finalizers"] == ["f1"]
    assert ObjectMeta.from_dict(data) == meta


def test_empty_object_meta_serialises_to_nothing():
    assert ObjectMeta().to_dict() == {}
    assert ObjectMeta.from_dict(None) == ObjectMeta()


def test_object_meta_rejects_non_mapping():
    with pytest.raises(TypeError):
        ObjectMeta.from_dict(["name"])


def test_list_meta_round_trip():
    meta = ListMeta(resource_version="12", continue_token="next", remaining_item_count=4)
    data = meta.to_dict()
    assert data["continue"] == "next"
    assert ListMeta.from_dict(data) == meta


def test_api_endpoint_always_carries_host_and_port():
    assert set(APIEndpoint().to_dict()) == {"host", "port"}
    endpoint = APIEndpoint(host="10.0.0.1", port=6443)
    assert APIEndpoint.from_dict(endpoint.to_dict()) == endpoint


def test_machine_address_round_trip():
    addr = MachineAddress(type="InternalIP", address="10.0.0.5")
    assert MachineAddress.from_dict(addr.to_dict()) == addr


def test_object_reference_uses_camel_case_keys():
    ref = ObjectReference(kind="Node", name="n1", api_version="v1", field_path="spec")
    data = ref.to_dict()
    assert data["apiVersion"] == "v1"
    assert data["fieldPath"] == "spec"
    assert "namespace" not in data
    assert ObjectReference.from_dict(data) == ref


def test_failure_domain_spec_round_trip():
    fd = FailureDomainSpec(control_plane=True, attributes={"zone": "a"})
    assert FailureDomainSpec.from_dict(fd.to_dict()) == fd
    assert FailureDomainSpec().to_dict() == {}


def test_prism_endpoint_round_trip():
    endpoint = PrismEndpoint(
        address="pc.example.com",
        port=9440,
        insecure=True,
        credential_ref={"kind": "Secret", "name": "creds"},
    )
    data = endpoint.to_dict()
    assert data["credentialRef"]["name"] == "creds"
    assert "additionalTrustBundle" not in data
    assert PrismEndpoint.from_dict(data) == endpoint