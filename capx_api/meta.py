"""API group versions and the shared object types used by the Nutanix resources."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

GROUP_NAME = "infrastructure.cluster.x-k8s.io"
"""Name of the API group the Nutanix infrastructure resources belong to."""


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{what} must be a mapping, not {type(data).__name__}")
    return data


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    """Store ``value`` under ``key`` unless it is empty (JSON ``omitempty``)."""
    if value:
        out[key] = value


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def api_version(self) -> str:
        """Return the ``apiVersion`` string, ``group/version`` or just ``version``."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @classmethod
    def parse(cls, api_version: str) -> GroupVersion:
        """Parse an ``apiVersion`` string such as ``group/version`` or ``v1``."""
        if not api_version or api_version == "/":
            return cls("", "")
        parts = api_version.split("/")
        if len(parts) == 1:
            return cls("", parts[0])
        if len(parts) == 2:
            return cls(parts[0], parts[1])
        raise ValueError(f"unexpected GroupVersion string: {api_version!r}")

    def __str__(self) -> str:
        return self.api_version()


VERSION = "v1beta1"
"""The storage (hub) version of the API."""

V1BETA1 = GroupVersion(GROUP_NAME, VERSION)
V1ALPHA4 = GroupVersion(GROUP_NAME, "v1alpha4")


@dataclass
class ObjectMeta:
    """Metadata every persisted resource carries."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    finalizers: list[str] = field(default_factory=list)
    owner_references: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "name", self.name)
        _put(out, "namespace", self.namespace)
        _put(out, "labels", dict(self.labels))
        _put(out, "annotations", dict(self.annotations))
        _put(out, "uid", self.uid)
        _put(out, "resourceVersion", self.resource_version)
        _put(out, "generation", self.generation)
        _put(out, "finalizers", list(self.finalizers))
        _put(out, "ownerReferences", [dict(ref) for ref in self.owner_references])
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ObjectMeta:
        data = _require_mapping(data if data is not None else {}, "metadata")
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            uid=data.get("uid", ""),
            resource_version=data.get("resourceVersion", ""),
            generation=int(data.get("generation", 0) or 0),
            finalizers=list(data.get("finalizers") or []),
            owner_references=[dict(ref) for ref in data.get("ownerReferences") or []],
        )


@dataclass
class ListMeta:
    """Metadata carried by list resources."""

    resource_version: str = ""
    continue_token: str = ""
    remaining_item_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "resourceVersion", self.resource_version)
        _put(out, "continue", self.continue_token)
        if self.remaining_item_count is not None:
            out["remainingItemCount"] = self.remaining_item_count
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ListMeta:
        data = _require_mapping(data if data is not None else {}, "list metadata")
        remaining = data.get("remainingItemCount")
        return cls(
            resource_version=data.get("resourceVersion", ""),
            continue_token=data.get("continue", ""),
            remaining_item_count=None if remaining is None else int(remaining),
        )


@dataclass
class APIEndpoint:
    """An endpoint through which a control plane is reached."""

    host: str = ""
    port: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"host": self.host, "port": self.port}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> APIEndpoint:
        data = _require_mapping(data if data is not None else {}, "endpoint")
        return cls(host=data.get("host", ""), port=int(data.get("port", 0) or 0))


@dataclass
class MachineAddress:
    """An address assigned to a machine, with its type (Hostname, InternalIP, ...)."""

    type: str
    address: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "address": self.address}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MachineAddress:
        data = _require_mapping(data, "machine address")
        return cls(type=data.get("type", ""), address=data.get("address", ""))


@dataclass
class ObjectReference:
    """A reference to another API object."""

    kind: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    api_version: str = ""
    resource_version: str = ""
    field_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "kind", self.kind)
        _put(out, "namespace", self.namespace)
        _put(out, "name", self.name)
        _put(out, "uid", self.uid)
        _put(out, "apiVersion", self.api_version)
        _put(out, "resourceVersion", self.resource_version)
        _put(out, "fieldPath", self.field_path)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ObjectReference:
        data = _require_mapping(data, "object reference")
        return cls(
            kind=data.get("kind", ""),
            namespace=data.get("namespace", ""),
            name=data.get("name", ""),
            uid=data.get("uid", ""),
            api_version=data.get("apiVersion", ""),
            resource_version=data.get("resourceVersion", ""),
            field_path=data.get("fieldPath", ""),
        )


@dataclass
class FailureDomainSpec:
    """What the status reports about one failure domain."""

    control_plane: bool = False
    attributes: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "controlPlane", self.control_plane)
        _put(out, "attributes", dict(self.attributes))
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> FailureDomainSpec:
        data = _require_mapping(data if data is not None else {}, "failure domain")
        return cls(
            control_plane=bool(data.get("controlPlane", False)),
            attributes=dict(data.get("attributes") or {}),
        )


@dataclass
class PrismEndpoint:
    """Address, port and credentials reference for a Prism Central endpoint."""

    address: str = ""
    port: int = 0
    insecure: bool = False
    additional_trust_bundle: dict[str, Any] | None = None
    credential_ref: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "address": self.address,
            "port": self.port,
            "insecure": self.insecure,
        }
        if self.additional_trust_bundle is not None:
            out["additionalTrustBundle"] = dict(self.additional_trust_bundle)
        if self.credential_ref is not None:
            out["credentialRef"] = dict(self.credential_ref)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PrismEndpoint:
        data = _require_mapping(data, "prism endpoint")
        bundle = data.get("additionalTrustBundle")
        cred = data.get("credentialRef")
        return cls(
            address=data.get("address", ""),
            port=int(data.get("port", 0) or 0),
            insecure=bool(data.get("insecure", False)),
            additional_trust_bundle=None if bundle is None else dict(bundle),
            credential_ref=None if cred is None else dict(cred),
        )