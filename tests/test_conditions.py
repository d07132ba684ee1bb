from datetime import datetime, timezone

import pytest

from capx_api.conditions import (
    PRISM_CENTRAL_CLIENT_CONDITION,
    PROJECT_ASSIGNATION_FAILED,
    PROJECT_ASSIGNED_CONDITION,
    VM_PROVISIONED_CONDITION,
    Condition,
    ConditionSeverity,
    ConditionStatus,
    find_condition,
)


def test_from_dict_reads_status_enum():
    cond = Condition.from_dict({"type": PRISM_CENTRAL_CLIENT_CONDITION, "status": "True"})
    assert cond.status is ConditionStatus.TRUE
    assert cond.severity is ConditionSeverity.NONE


def test_round_trip_with_all_fields():
    cond = Condition(
        type=PROJECT_ASSIGNED_CONDITION,
        status=ConditionStatus.FALSE,
        severity=ConditionSeverity.ERROR,
        last_transition_time=datetime(2023, 5, 1, 12, 30, tzinfo=timezone.utc),
        reason=PROJECT_ASSIGNATION_FAILED,
        message="failed to retrieve project",
    )
    data = cond.to_dict()
    assert data["reason"] == "ProjectAssignationFailed"
    assert data["lastTransitionTime"] == "2023-05-01T12:30:00Z"
    assert Condition.from_dict(data) == cond


def test_to_dict_omits_empty_fields():
    cond = Condition(type=VM_PROVISIONED_CONDITION, status=ConditionStatus.UNKNOWN)
    assert set(cond.to_dict()) == {"type", "status"}


@pytest.mark.parametrize(
    ("data", "error"),
    [
        ({"status": "True"}, ValueError),
        ({"type": VM_PROVISIONED_CONDITION}, ValueError),
        ({"type": VM_PROVISIONED_CONDITION, "status": "maybe"}, ValueError),
        ("VMProvisioned", TypeError),
    ],
    ids=["missing-type", "missing-status", "invalid-status", "not-a-mapping"],
)
def test_invalid_input_raises(data, error):
    with pytest.raises(error):
        Condition.from_dict(data)


def test_find_condition():
    first = Condition(type=VM_PROVISIONED_CONDITION, status=ConditionStatus.TRUE)
    second = Condition(type=PROJECT_ASSIGNED_CONDITION, status=ConditionStatus.FALSE)
    conditions = [first, second]
    assert find_condition(conditions, PROJECT_ASSIGNED_CONDITION) is second
    assert find_condition(conditions, PRISM_CENTRAL_CLIENT_CONDITION) is None
    assert find_condition([], VM_PROVISIONED_CONDITION) is None