"""
Leave schemas package.
"""

from leave_api.schemas.leave.leave_application import (
    LeaveApplyRequest,
    LeaveEditRequest,
    LeaveStatusUpdate,
)
from leave_api.schemas.leave.leave_response import (
    CalendarEvent,
    ChartEntry,
    LeaveBalanceResponse,
    LeaveResponse,
)

__all__ = [
    "LeaveApplyRequest",
    "LeaveEditRequest",
    "LeaveStatusUpdate",
    "CalendarEvent",
    "ChartEntry",
    "LeaveBalanceResponse",
    "LeaveResponse",
]
