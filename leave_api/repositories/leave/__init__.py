"""
Leave repositories package.
"""

from leave_api.repositories.leave.leave_balance_repository import LeaveBalanceRepository
from leave_api.repositories.leave.leave_request_repository import (
    INBOX_SORT_COLUMNS,
    PERSONAL_SORT_COLUMNS,
    LeaveRequestRepository,
)

__all__ = [
    "INBOX_SORT_COLUMNS",
    "PERSONAL_SORT_COLUMNS",
    "LeaveBalanceRepository",
    "LeaveRequestRepository",
]
