# leave_api/schemas/leave/leave_application.py
"""
Leave request input schemas.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field

from leave_api.models.base.enums import LeaveStatus, LeaveType
from leave_api.schemas.common.base import BaseSchema

__all__ = [
    "LeaveApplyRequest",
    "LeaveEditRequest",
    "LeaveStatusUpdate",
]


class LeaveApplyRequest(BaseSchema):
    """
    New leave request.

    ``requested_to`` is the id of the approver the request is addressed
    to; it must hold the role the routing rules expect for the requester.
    """

    requested_to: str = Field(..., min_length=1, description="Approver user id")
    start_date: date = Field(..., description="First day of leave")
    end_date: date = Field(..., description="Last day of leave (inclusive)")
    leave_type: LeaveType = Field(..., description="Kind of leave")
    reason: str = Field(..., min_length=5, description="Reason for the leave")


class LeaveEditRequest(LeaveApplyRequest):
    """Replacement fields for a pending request; status is never edited here."""


class LeaveStatusUpdate(BaseSchema):
    status: LeaveStatus = Field(..., description="APPROVED or REJECTED")
