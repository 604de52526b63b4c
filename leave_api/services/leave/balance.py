# leave_api/services/leave/balance.py
"""
Leave balance arithmetic.

A request is worth ``leave_value * days`` balance days: half a day per
calendar day for HALF_DAY requests, one for every other kind.
"""
from __future__ import annotations

from datetime import date

from leave_api.core.constants import Messages
from leave_api.models.base.enums import LeaveStatus, LeaveType
from leave_api.services.common.errors import ConflictError, ValidationError

TRANSITION_TARGETS = frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED})

# Sign applied to the request's worth, per (old, new) status
_ADJUSTMENT_SIGN = {
    (LeaveStatus.PENDING, LeaveStatus.APPROVED): -1,
    (LeaveStatus.PENDING, LeaveStatus.REJECTED): 0,
    (LeaveStatus.APPROVED, LeaveStatus.REJECTED): 1,
    (LeaveStatus.REJECTED, LeaveStatus.APPROVED): -1,
}


def leave_value(leave_type: LeaveType) -> float:
    return 0.5 if leave_type == LeaveType.HALF_DAY else 1.0


def count_days(start: date, end: date) -> int:
    """Calendar days from ``start`` to ``end``, both inclusive."""
    return (end - start).days + 1


def leave_worth(leave_type: LeaveType, start: date, end: date) -> float:
    return leave_value(leave_type) * count_days(start, end)


def balance_adjustment(
    old: LeaveStatus,
    new: LeaveStatus,
    leave_type: LeaveType,
    start: date,
    end: date,
) -> float:
    """
    Change to ``available`` caused by moving a request from ``old`` to ``new``.

    Raises:
        ValidationError: If ``new`` is not APPROVED or REJECTED
        ConflictError: If the status would not change
    """
    if new not in TRANSITION_TARGETS:
        raise ValidationError(
            f"Status must be one of: {', '.join(sorted(s.value for s in TRANSITION_TARGETS))}",
            field="status",
        )
    if old == new:
        raise ConflictError(Messages.LEAVE_STATUS_UNCHANGED, conflicting_field="status")

    sign = _ADJUSTMENT_SIGN[(old, new)]
    if sign == 0:
        return 0.0
    return sign * leave_worth(leave_type, start, end)


def restoration_on_delete(status: LeaveStatus, leave_type: LeaveType, start: date, end: date) -> float:
    """Days returned to ``available`` when a request is deleted."""
    if status == LeaveStatus.APPROVED:
        return leave_worth(leave_type, start, end)
    return 0.0
