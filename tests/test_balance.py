from datetime import date

import pytest

from leave_api.models.base.enums import LeaveStatus, LeaveType
from leave_api.services.common.errors import ConflictError, ValidationError
from leave_api.services.leave import (
    balance_adjustment,
    count_days,
    leave_value,
    leave_worth,
    restoration_on_delete,
)

MON = date(2024, 3, 4)
WED = date(2024, 3, 6)


def test_leave_value_half_day_counts_half():
    assert leave_value(LeaveType.HALF_DAY) == 0.5
    assert leave_value(LeaveType.FULL_DAY) == 1.0
    assert leave_value(LeaveType.SICK_LEAVE) == 1.0
    assert leave_value(LeaveType.CASUAL_LEAVE) == 1.0


def test_days_are_inclusive():
    assert count_days(MON, MON) == 1
    assert count_days(MON, WED) == 3


def test_worth_multiplies_value_and_days():
    assert leave_worth(LeaveType.FULL_DAY, MON, WED) == 3
    assert leave_worth(LeaveType.HALF_DAY, MON, WED) == 1.5


@pytest.mark.parametrize(
    "old, new, expected",
    [
        (LeaveStatus.PENDING, LeaveStatus.APPROVED, -3),
        (LeaveStatus.PENDING, LeaveStatus.REJECTED, 0),
        (LeaveStatus.APPROVED, LeaveStatus.REJECTED, 3),
        (LeaveStatus.REJECTED, LeaveStatus.APPROVED, -3),
    ],
)
def test_adjustment_per_transition(old, new, expected):
    assert balance_adjustment(old, new, LeaveType.FULL_DAY, MON, WED) == expected


def test_same_status_is_a_conflict():
    with pytest.raises(ConflictError):
        balance_adjustment(LeaveStatus.APPROVED, LeaveStatus.APPROVED, LeaveType.FULL_DAY, MON, WED)


def test_pending_is_not_a_transition_target():
    with pytest.raises(ValidationError):
        balance_adjustment(LeaveStatus.APPROVED, LeaveStatus.PENDING, LeaveType.FULL_DAY, MON, WED)


def test_half_day_single_day_approval_costs_half():
    assert balance_adjustment(
        LeaveStatus.PENDING, LeaveStatus.APPROVED, LeaveType.HALF_DAY, MON, MON
    ) == -0.5


def test_restoration_only_for_approved():
    assert restoration_on_delete(LeaveStatus.APPROVED, LeaveType.FULL_DAY, MON, WED) == 3
    assert restoration_on_delete(LeaveStatus.PENDING, LeaveType.FULL_DAY, MON, WED) == 0
    assert restoration_on_delete(LeaveStatus.REJECTED, LeaveType.FULL_DAY, MON, WED) == 0
