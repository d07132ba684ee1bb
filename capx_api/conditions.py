"""Condition types, reasons and the condition record reported in resource status."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

DELETION_FAILED = "DeletionFailed"

FAILURE_DOMAINS_RECONCILED = "FailureDomainsReconciled"
NO_FAILURE_DOMAINS_RECONCILED = "NoFailureDomainsReconciled"
FAILURE_DOMAINS_RECONCILIATION_FAILED = "FailureDomainsReconciliationFailed"

CLUSTER_CATEGORY_CREATED_CONDITION = "ClusterCategoryCreated"
CLUSTER_CATEGORY_CREATION_FAILED = "ClusterCategoryCreationFailed"

PRISM_CENTRAL_CLIENT_CONDITION = "PrismClientInit"
PRISM_CENTRAL_CLIENT_INITIALIZATION_FAILED = "PrismClientInitFailed"

VM_PROVISIONED_CONDITION = "VMProvisioned"
VM_PROVISIONED_TASK_FAILED = "FailedVMTask"
VM_ADDRESSES_ASSIGNED_CONDITION = "VMAddressesAssigned"
VM_ADDRESSES_FAILED = "VMAddressesFailed"
VM_BOOT_TYPE_INVALID = "VMBootTypeInvalid"
CLUSTER_INFRASTRUCTURE_NOT_READY = "ClusterInfrastructureNotReady"
BOOTSTRAP_DATA_NOT_READY = "BootstrapDataNotReady"
CONTROLPLANE_NOT_INITIALIZED = "ControlplaneNotInitialized"

PROJECT_ASSIGNED_CONDITION = "ProjectAssigned"
PROJECT_ASSIGNATION_FAILED = "ProjectAssignationFailed"

CREDENTIAL_REF_SECRET_OWNER_SET_CONDITION = "CredentialRefSecretOwnerSet"
CREDENTIAL_REF_SECRET_OWNER_SET_FAILED = "CredentialRefSecretOwnerSetFailed"


class ConditionStatus(str, Enum):
    """Whether a condition holds."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionSeverity(str, Enum):
    """How serious a false condition is."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    NONE = ""


_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _parse_time(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"invalid lastTransitionTime: {text!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass
class Condition:
    """The observed state of one aspect of a resource."""

    type: str
    status: ConditionStatus
    severity: ConditionSeverity = ConditionSeverity.NONE
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "status": self.status.value}
        if self.severity.value:
            out["severity"] = self.severity.value
        if self.last_transition_time is not None:
            out["lastTransitionTime"] = _format_time(self.last_transition_time)
        if self.reason:
            out["reason"] = self.reason
        if self.message:
            out["message"] = self.message
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Condition:
        if not isinstance(data, Mapping):
            raise TypeError(f"condition must be a mapping, not {type(data).__name__}")
        condition_type = data.get("type")
        if not condition_type:
            raise ValueError("condition is missing its type")
        if "status" not in data:
            raise ValueError(f"condition {condition_type!r} is missing its status")
        try:
            status = ConditionStatus(data["status"])
            severity = ConditionSeverity(data.get("severity", ""))
        except ValueError as exc:
            raise ValueError(f"condition {condition_type!r}: {exc}") from exc
        raw_time = data.get("lastTransitionTime")
        return cls(
            type=condition_type,
            status=status,
            severity=severity,
            last_transition_time=_parse_time(raw_time) if raw_time else None,
            reason=data.get("reason", ""),
            message=data.get("message", ""),
        )


def find_condition(conditions: Iterable[Condition], condition_type: str) -> Condition | None:
    """Return the condition of the given type, or None if there is none."""
    return next((c for c in conditions if c.type == condition_type), None)