"""
Leave Service Layer

- Leave requests: apply, edit, delete, personal and inbox listings
- Status transitions with atomic balance adjustment
- Routing rules deciding who approves whom
- Calendar and balance chart views
"""

from leave_api.services.leave.balance import (
    balance_adjustment,
    count_days,
    leave_value,
    leave_worth,
    restoration_on_delete,
)
from leave_api.services.leave.leave_service import LeaveService
from leave_api.services.leave.routing import (
    ApproverRule,
    InboxScope,
    resolve_approver_rule,
    resolve_inbox_scope,
)

__all__ = [
    "balance_adjustment",
    "count_days",
    "leave_value",
    "leave_worth",
    "restoration_on_delete",
    "LeaveService",
    "ApproverRule",
    "InboxScope",
    "resolve_approver_rule",
    "resolve_inbox_scope",
]
