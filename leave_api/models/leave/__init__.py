"""
Leave models package.
"""

from leave_api.models.leave.leave_balance import LeaveBalance
from leave_api.models.leave.leave_request import LeaveRequest

__all__ = ["LeaveBalance", "LeaveRequest"]
