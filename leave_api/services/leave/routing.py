# leave_api/services/leave/routing.py
"""
Leave routing rules.

Decides who a requester's leave goes to and which requests an approver
sees in their inbox. Both are pure functions of role and department.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from leave_api.models.base.enums import Department, RoleName
from leave_api.services.common.errors import ValidationError
from leave_api.services.common.permissions import PermissionDenied, Principal

DEPARTMENT_REQUIRED = "A department is required to route leave requests"


@dataclass(frozen=True)
class ApproverRule:
    """Role the approver must hold, and the department they must share (if any)."""
    target_role: RoleName
    department: Optional[Department] = None

    def accepts(self, role: RoleName, department: Optional[Department]) -> bool:
        if role != self.target_role:
            return False
        return self.department is None or department == self.department


@dataclass(frozen=True)
class InboxScope:
    """
    Row filters for an approver's inbox.

    ``None`` on every field means every request is visible.
    """
    requested_to_id: Optional[str] = None
    department: Optional[Department] = None
    exclude_user_id: Optional[str] = None


def resolve_approver_rule(role: RoleName, department: Optional[Department]) -> ApproverRule:
    """
    Map a requester to the approvers they may address.

    STUDENT goes to STAFF of the same department, STAFF to the HOD of the
    same department, everyone else to ADMIN.

    Raises:
        ValidationError: If a STUDENT or STAFF requester has no department
    """
    if role in (RoleName.STUDENT, RoleName.STAFF):
        if department is None:
            raise ValidationError(DEPARTMENT_REQUIRED, field="department")
        target = RoleName.STAFF if role == RoleName.STUDENT else RoleName.HOD
        return ApproverRule(target_role=target, department=department)
    return ApproverRule(target_role=RoleName.ADMIN)


def resolve_inbox_scope(principal: Principal, show_all: bool = False) -> InboxScope:
    """
    Inbox visibility for ``principal``.

    Args:
        principal: Caller
        show_all: ``leave=all`` was requested; widens the ADMIN inbox to
            every request and the HOD inbox to their department

    Raises:
        PermissionDenied: For roles without an inbox
        ValidationError: For an HOD without a department asking for all requests
    """
    own = InboxScope(requested_to_id=principal.user_id)

    if principal.role == RoleName.ADMIN:
        return InboxScope() if show_all else own
    if principal.role == RoleName.HOD:
        if not show_all:
            return own
        if principal.department is None:
            raise ValidationError(DEPARTMENT_REQUIRED, field="department")
        return InboxScope(department=principal.department, exclude_user_id=principal.user_id)
    if principal.role == RoleName.STAFF:
        return own
    raise PermissionDenied(user_id=principal.user_id, role=principal.role)
