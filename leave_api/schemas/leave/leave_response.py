# leave_api/schemas/leave/leave_response.py
"""
Leave response schemas.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field

from leave_api.models.base.enums import Department, LeaveStatus, LeaveType, RoleName
from leave_api.schemas.common.base import BaseResponseSchema, BaseSchema
from leave_api.schemas.user.user_response import ApproverOption, UserSummary

__all__ = [
    "LeaveResponse",
    "LeaveBalanceResponse",
    "CalendarEvent",
    "ChartEntry",
]


class LeaveResponse(BaseResponseSchema):
    """Leave request with the people involved."""

    user_id: str
    requested_to_id: str
    approved_by_id: Optional[str] = None
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str
    status: LeaveStatus

    user: Optional[UserSummary] = None
    requested_to: Optional[ApproverOption] = None
    approved_by: Optional[ApproverOption] = None


class LeaveBalanceResponse(BaseSchema):
    total: float
    available: float
    used: float
    academic_year: str


class CalendarEvent(BaseSchema):
    """Approved leave rendered as a calendar entry."""

    id: str
    title: str = Field(..., description="Requester name")
    start: date
    end: date
    calendar_id: LeaveType


class ChartEntry(BaseSchema):
    """Per-user leave usage for the admin chart."""

    user_id: str
    name: str
    department: Optional[Department] = None
    role: Optional[RoleName] = None
    used_leaves: float
    total_leaves: float
