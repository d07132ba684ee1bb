"""Nutanix infrastructure resources, v1alpha4: an older served version of the API."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from .conditions import Condition
from .meta import (
    V1ALPHA4,
    APIEndpoint,
    FailureDomainSpec,
    ListMeta,
    MachineAddress,
    ObjectMeta,
    ObjectReference,
    PrismEndpoint,
)

GROUP_VERSION = V1ALPHA4
"""The group version the types in this module are registered under."""

NUTANIX_CLUSTER_KIND = "NutanixCluster"
NUTANIX_CLUSTER_LIST_KIND = "NutanixClusterList"
NUTANIX_MACHINE_KIND = "NutanixMachine"
NUTANIX_MACHINE_LIST_KIND = "NutanixMachineList"
NUTANIX_MACHINE_TEMPLATE_KIND = "NutanixMachineTemplate"
NUTANIX_MACHINE_TEMPLATE_LIST_KIND = "NutanixMachineTemplateList"

NUTANIX_CLUSTER_FINALIZER = "nutanixcluster.infrastructure.cluster.x-k8s.io"
NUTANIX_CLUSTER_CREDENTIAL_FINALIZER = "nutanixcluster/infrastructure.cluster.x-k8s.io"
NUTANIX_MACHINE_FINALIZER = "nutanixmachine.infrastructure.cluster.x-k8s.io"

OBSOLETE_DEFAULT_CAPI_CATEGORY_PREFIX = "kubernetes-io-cluster-"
DEFAULT_CAPI_CATEGORY_KEY_FOR_NAME = "KubernetesClusterName"
DEFAULT_CAPI_CATEGORY_DESCRIPTION = "Managed by CAPX"
OBSOLETE_DEFAULT_CAPI_CATEGORY_OWNED_VALUE = "owned"

FAILURE_DOMAIN_NAME_MAX_LENGTH = 64
_FAILURE_DOMAIN_NAME_PATTERN = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?")

_E = TypeVar("_E", bound=Enum)


class NutanixIdentifierType(str, Enum):
    """How a Prism Central resource is identified."""

    UUID = "uuid"
    NAME = "name"


class NutanixBootType(str, Enum):
    """Boot type of a virtual machine."""

    LEGACY = "legacy"
    UEFI = "uefi"


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"{what} must be a mapping, not {type(data).__name__}")
    return data


def _enum(enum_cls: type[_E], value: Any, what: str) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(member.value) for member in enum_cls)
        raise ValueError(f"invalid {what} {value!r}: expected one of {allowed}") from None


def _check_type_meta(data: Mapping[str, Any], kind: str) -> None:
    api_version = data.get("apiVersion")
    if api_version and api_version != GROUP_VERSION.api_version():
        raise ValueError(
            f"{kind}: apiVersion {api_version!r} is not {GROUP_VERSION.api_version()!r}"
        )
    found_kind = data.get("kind")
    if found_kind and found_kind != kind:
        raise ValueError(f"expected kind {kind!r}, got {found_kind!r}")


def _type_meta(kind: str) -> dict[str, Any]:
    return {"apiVersion": GROUP_VERSION.api_version(), "kind": kind}


@dataclass
class NutanixResourceIdentifier:
    """Identity of a Prism Central resource (cluster, image, subnet, project...)."""

    type: NutanixIdentifierType
    uuid: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        self.type = _enum(NutanixIdentifierType, self.type, "identifier type")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type.value}
        if self.uuid is not None:
            out["uuid"] = self.uuid
        if self.name is not None:
            out["name"] = self.name
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixResourceIdentifier:
        data = _mapping(data, "resource identifier")
        if not data.get("type"):
            raise ValueError("resource identifier is missing its type")
        return cls(type=data["type"], uuid=data.get("uuid"), name=data.get("name"))


@dataclass
class NutanixCategoryIdentifier:
    """A Prism Central category key and value."""

    key: str = ""
    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.key:
            out["key"] = self.key
        if self.value:
            out["value"] = self.value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixCategoryIdentifier:
        data = _mapping(data, "category identifier")
        return cls(key=data.get("key", ""), value=data.get("value", ""))


@dataclass
class NutanixFailureDomain:
    """A failure domain: a Prism Element cluster and the subnets to use there."""

    name: str
    cluster: NutanixResourceIdentifier
    subnets: list[NutanixResourceIdentifier]
    control_plane: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("failure domain name must not be empty")
        if len(self.name) > FAILURE_DOMAIN_NAME_MAX_LENGTH:
            raise ValueError(
                f"failure domain name {self.name!r} is longer than "
                f"{FAILURE_DOMAIN_NAME_MAX_LENGTH} characters"
            )
        if not _FAILURE_DOMAIN_NAME_PATTERN.search(self.name):
            raise ValueError(f"failure domain name {self.name!r} is not valid")
        if not self.subnets:
            raise ValueError(f"failure domain {self.name!r} needs at least one subnet")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "cluster": self.cluster.to_dict(),
            "subnets": [subnet.to_dict() for subnet in self.subnets],
        }
        if self.control_plane:
            out["controlPlane"] = True
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixFailureDomain:
        data = _mapping(data, "failure domain")
        if data.get("cluster") is None:
            raise ValueError(f"failure domain {data.get('name', '')!r} is missing its cluster")
        return cls(
            name=data.get("name", ""),
            cluster=NutanixResourceIdentifier.from_dict(data["cluster"]),
            subnets=[NutanixResourceIdentifier.from_dict(s) for s in data.get("subnets") or []],
            control_plane=bool(data.get("controlPlane", False)),
        )


@dataclass
class NutanixClusterSpec:
    """Desired state of a NutanixCluster."""

    control_plane_endpoint: APIEndpoint = field(default_factory=APIEndpoint)
    prism_central: PrismEndpoint | None = None
    failure_domains: list[NutanixFailureDomain] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "controlPlaneEndpoint": self.control_plane_endpoint.to_dict(),
            "prismCentral": None if self.prism_central is None else self.prism_central.to_dict(),
            "failureDomains": [fd.to_dict() for fd in self.failure_domains],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NutanixClusterSpec:
        data = _mapping(data, "cluster spec")
        prism = data.get("prismCentral")
        return cls(
            control_plane_endpoint=APIEndpoint.from_dict(data.get("controlPlaneEndpoint")),
            prism_central=None if prism is None else PrismEndpoint.from_dict(prism),
            failure_domains=[
                NutanixFailureDomain.from_dict(fd) for fd in data.get("failureDomains") or []
            ],
        )


@dataclass
class NutanixClusterStatus:
    """Observed state of a NutanixCluster."""

    ready: bool = False
    failure_domains: dict[str, FailureDomainSpec] = field(default_factory=dict)
    conditions: list[Condition] = field(default_factory=list)
    failure_reason: str | None = None
    failure_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.ready:
            out["ready"] = True
        if self.failure_domains:
            out["failureDomains"] = {
                name: spec.to_dict() for name, spec in self.failure_domains.items()
            }
        if self.conditions:
            out["conditions"] = [c.to_dict() for c in self.conditions]
        if self.failure_reason is not None:
            out["failureReason"] = self.failure_reason
        if self.failure_message is not None:
            out["failureMessage"] = self.failure_message
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NutanixClusterStatus:
        data = _mapping(data, "cluster status")
        domains = _mapping(data.get("failureDomains"), "failure domains")
        return cls(
            ready=bool(data.get("ready", False)),
            failure_domains={
                name: FailureDomainSpec.from_dict(spec) for name, spec in domains.items()
            },
            conditions=[Condition.from_dict(c) for c in data.get("conditions") or []],
            failure_reason=data.get("failureReason"),
            failure_message=data.get("failureMessage"),
        )


@dataclass
class NutanixCluster:
    """A cluster's Nutanix infrastructure."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: NutanixClusterSpec = field(default_factory=NutanixClusterSpec)
    status: NutanixClusterStatus = field(default_factory=NutanixClusterStatus)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(NUTANIX_CLUSTER_KIND),
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixCluster:
        data = _mapping(data, NUTANIX_CLUSTER_KIND)
        _check_type_meta(data, NUTANIX_CLUSTER_KIND)
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=NutanixClusterSpec.from_dict(data.get("spec")),
            status=NutanixClusterStatus.from_dict(data.get("status")),
        )


@dataclass
class NutanixClusterList:
    """A list of NutanixCluster resources."""

    items: list[NutanixCluster] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(NUTANIX_CLUSTER_LIST_KIND),
            "metadata": self.metadata.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixClusterList:
        data = _mapping(data, NUTANIX_CLUSTER_LIST_KIND)
        _check_type_meta(data, NUTANIX_CLUSTER_LIST_KIND)
        return cls(
            items=[NutanixCluster.from_dict(item) for item in data.get("items") or []],
            metadata=ListMeta.from_dict(data.get("metadata")),
        )


@dataclass
class NutanixMachineSpec:
    """Desired state of a NutanixMachine: the VM to create and where."""

    image: NutanixResourceIdentifier
    provider_id: str = ""
    vcpus_per_socket: int = 0
    vcpu_sockets: int = 0
    memory_size: str = "0"
    cluster: NutanixResourceIdentifier | None = None
    subnets: list[NutanixResourceIdentifier] = field(default_factory=list)
    additional_categories: list[NutanixCategoryIdentifier] = field(default_factory=list)
    project: NutanixResourceIdentifier | None = None
    boot_type: NutanixBootType | None = None
    system_disk_size: str = "0"
    bootstrap_ref: ObjectReference | None = None

    def __post_init__(self) -> None:
        if self.boot_type is not None:
            self.boot_type = _enum(NutanixBootType, self.boot_type, "boot type")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "providerID": self.provider_id,
            "vcpusPerSocket": self.vcpus_per_socket,
            "vcpuSockets": self.vcpu_sockets,
            "memorySize": self.memory_size,
            "image": self.image.to_dict(),
        }
        if self.cluster is not None:
            out["cluster"] = self.cluster.to_dict()
        out["subnet"] = [subnet.to_dict() for subnet in self.subnets]
        if self.additional_categories:
            out["additionalCategories"] = [c.to_dict() for c in self.additional_categories]
        if self.project is not None:
            out["project"] = self.project.to_dict()
        if self.boot_type is not None:
            out["bootType"] = self.boot_type.value
        out["systemDiskSize"] = self.system_disk_size
        if self.bootstrap_ref is not None:
            out["bootstrapRef"] = self.bootstrap_ref.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NutanixMachineSpec:
        data = _mapping(data, "machine spec")
        if data.get("image") is None:
            raise ValueError("machine spec is missing its image")
        cluster = _mapping(data.get("cluster"), "cluster identifier")
        project = data.get("project")
        bootstrap_ref = data.get("bootstrapRef")
        return cls(
            image=NutanixResourceIdentifier.from_dict(data["image"]),
            provider_id=data.get("providerID", ""),
            vcpus_per_socket=int(data.get("vcpusPerSocket", 0) or 0),
            vcpu_sockets=int(data.get("vcpuSockets", 0) or 0),
            memory_size=str(data.get("memorySize", "0")),
            cluster=NutanixResourceIdentifier.from_dict(cluster) if cluster.get("type") else None,
            subnets=[NutanixResourceIdentifier.from_dict(s) for s in data.get("subnet") or []],
            additional_categories=[
                NutanixCategoryIdentifier.from_dict(c)
                for c in data.get("additionalCategories") or []
            ],
            project=None if project is None else NutanixResourceIdentifier.from_dict(project),
            boot_type=data.get("bootType") or None,
            system_disk_size=str(data.get("systemDiskSize", "0")),
            bootstrap_ref=(
                None if bootstrap_ref is None else ObjectReference.from_dict(bootstrap_ref)
            ),
        )


@dataclass
class NutanixMachineStatus:
    """Observed state of a NutanixMachine."""

    ready: bool = False
    addresses: list[MachineAddress] = field(default_factory=list)
    vm_uuid: str = ""
    node_ref: ObjectReference | None = None
    conditions: list[Condition] = field(default_factory=list)
    failure_reason: str | None = None
    failure_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"ready": self.ready}
        if self.addresses:
            out["addresses"] = [a.to_dict() for a in self.addresses]
        if self.vm_uuid:
            out["vmUUID"] = self.vm_uuid
        if self.node_ref is not None:
            out["nodeRef"] = self.node_ref.to_dict()
        if self.conditions:
            out["conditions"] = [c.to_dict() for c in self.conditions]
        if self.failure_reason is not None:
            out["failureReason"] = self.failure_reason
        if self.failure_message is not None:
            out["failureMessage"] = self.failure_message
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NutanixMachineStatus:
        data = _mapping(data, "machine status")
        node_ref = data.get("nodeRef")
        return cls(
            ready=bool(data.get("ready", False)),
            addresses=[MachineAddress.from_dict(a) for a in data.get("addresses") or []],
            vm_uuid=data.get("vmUUID", ""),
            node_ref=None if node_ref is None else ObjectReference.from_dict(node_ref),
            conditions=[Condition.from_dict(c) for c in data.get("conditions") or []],
            failure_reason=data.get("failureReason"),
            failure_message=data.get("failureMessage"),
        )


@dataclass
class NutanixMachine:
    """A machine backed by a Nutanix VM."""

    spec: NutanixMachineSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: NutanixMachineStatus = field(default_factory=NutanixMachineStatus)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(NUTANIX_MACHINE_KIND),
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixMachine:
        data = _mapping(data, NUTANIX_MACHINE_KIND)
        _check_type_meta(data, NUTANIX_MACHINE_KIND)
        return cls(
            spec=NutanixMachineSpec.from_dict(data.get("spec")),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            status=NutanixMachineStatus.from_dict(data.get("status")),
        )


@dataclass
class NutanixMachineList:
    """A list of NutanixMachine resources."""

    items: list[NutanixMachine] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(NUTANIX_MACHINE_LIST_KIND),
            "metadata": self.metadata.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixMachineList:
        data = _mapping(data, NUTANIX_MACHINE_LIST_KIND)
        _check_type_meta(data, NUTANIX_MACHINE_LIST_KIND)
        return cls(
            items=[NutanixMachine.from_dict(item) for item in data.get("items") or []],
            metadata=ListMeta.from_dict(data.get("metadata")),
        )


@dataclass
class NutanixMachineTemplateResource:
    """The data needed to create a NutanixMachine from a template."""

    spec: NutanixMachineSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": self.metadata.to_dict(), "spec": self.spec.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixMachineTemplateResource:
        data = _mapping(data, "machine template resource")
        return cls(
            spec=NutanixMachineSpec.from_dict(data.get("spec")),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
        )


@dataclass
class NutanixMachineTemplateSpec:
    """Desired state of a NutanixMachineTemplate."""

    template: NutanixMachineTemplateResource

    def to_dict(self) -> dict[str, Any]:
        return {"template": self.template.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NutanixMachineTemplateSpec:
        data = _mapping(data, "machine template spec")
        if data.get("template") is None:
            raise ValueError("machine template spec is missing its template")
        return cls(template=NutanixMachineTemplateResource.from_dict(data["template"]))


@dataclass
class NutanixMachineTemplate:
    """A template from which NutanixMachines are created."""

    spec: NutanixMachineTemplateSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(NUTANIX_MACHINE_TEMPLATE_KIND),
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixMachineTemplate:
        data = _mapping(data, NUTANIX_MACHINE_TEMPLATE_KIND)
        _check_type_meta(data, NUTANIX_MACHINE_TEMPLATE_KIND)
        return cls(
            spec=NutanixMachineTemplateSpec.from_dict(data.get("spec")),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
        )


@dataclass
class NutanixMachineTemplateList:
    """A list of NutanixMachineTemplate resources."""

    items: list[NutanixMachineTemplate] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(NUTANIX_MACHINE_TEMPLATE_LIST_KIND),
            "metadata": self.metadata.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NutanixMachineTemplateList:
        data = _mapping(data, NUTANIX_MACHINE_TEMPLATE_LIST_KIND)
        _check_type_meta(data, NUTANIX_MACHINE_TEMPLATE_LIST_KIND)
        return cls(
            items=[NutanixMachineTemplate.from_dict(item) for item in data.get("items") or []],
            metadata=ListMeta.from_dict(data.get("metadata")),
        )