# leave_api/services/leave/leave_service.py
from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from leave_api.core.constants import Messages
from leave_api.core.logging import get_logger
from leave_api.models.base.enums import LeaveStatus, RoleName
from leave_api.models.leave.leave_request import LeaveRequest
from leave_api.models.user.user import User
from leave_api.repositories.leave import LeaveBalanceRepository, LeaveRequestRepository
from leave_api.repositories.user import UserRepository
from leave_api.schemas.common.pagination import PaginatedResponse, PaginationParams
from leave_api.schemas.leave import (
    CalendarEvent,
    ChartEntry,
    LeaveApplyRequest,
    LeaveBalanceResponse,
    LeaveEditRequest,
    LeaveResponse,
)
from leave_api.schemas.user import ApproverOption
from leave_api.services.common import UnitOfWork, errors
from leave_api.services.common.pagination import paginate
from leave_api.services.common.permissions import (
    PermissionDenied,
    Principal,
    require_owner_or_admin,
)

from .balance import balance_adjustment, restoration_on_delete
from .routing import resolve_approver_rule, resolve_inbox_scope

logger = get_logger(__name__)


class LeaveService:
    """
    Leave request lifecycle.

    - Creation and editing validate the addressed approver against the
      routing rules.
    - Status transitions adjust the requester's balance in the same
      transaction, with the request and balance rows locked.
    - Deleting an approved request gives its days back.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _to_response(leave: LeaveRequest) -> LeaveResponse:
        return LeaveResponse.model_validate(leave)

    @staticmethod
    def _check_dates(data: LeaveApplyRequest) -> None:
        if data.start_date > data.end_date:
            raise errors.ValidationError(
                "Start date must be on or before end date",
                field="startDate",
            )

    @staticmethod
    def _check_range(date_from: Optional[date], date_to: Optional[date]) -> None:
        if date_from is not None and date_to is not None and date_from > date_to:
            raise errors.ValidationError("Date range start must be on or before its end", field="from")

    def _validate_approver(
        self,
        uow: UnitOfWork,
        principal: Principal,
        requested_to_id: str,
    ) -> User:
        if requested_to_id == principal.user_id:
            raise errors.ValidationError(Messages.INVALID_APPROVER, field="requestedTo")

        target = uow.get_repo(UserRepository).get(requested_to_id)
        if target is None:
            raise errors.NotFoundError("User", requested_to_id, message=Messages.USER_NOT_FOUND)

        rule = resolve_approver_rule(principal.role, principal.department)
        if not rule.accepts(RoleName(target.role.name), target.department):
            raise errors.ValidationError(
                Messages.INVALID_APPROVER,
                field="requestedTo",
                details={
                    "expectedRole": rule.target_role.value,
                    "expectedDepartment": rule.department.value if rule.department else None,
                },
            )
        return target

    @staticmethod
    def _require_self_or_approver(principal: Principal, user_id: str) -> None:
        if principal.user_id != user_id and principal.role == RoleName.STUDENT:
            raise PermissionDenied(user_id=principal.user_id, role=principal.role)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def apply(self, principal: Principal, data: LeaveApplyRequest) -> LeaveResponse:
        """
        Create a PENDING request addressed to ``data.requested_to``.

        The balance is untouched until the request is approved.
        """
        self._check_dates(data)

        with UnitOfWork(self._session_factory) as uow:
            self._validate_approver(uow, principal, data.requested_to)
            leave = uow.get_repo(LeaveRequestRepository).create(
                {
                    "user_id": principal.user_id,
                    "requested_to_id": data.requested_to,
                    "approved_by_id": None,
                    "start_date": data.start_date,
                    "end_date": data.end_date,
                    "leave_type": data.leave_type,
                    "reason": data.reason,
                    "status": LeaveStatus.PENDING,
                }
            )
            response = self._to_response(leave)

        logger.info(
            "leave_applied",
            leave_id=response.id,
            user_id=principal.user_id,
            requested_to=data.requested_to,
        )
        return response

    def transition_status(
        self,
        principal: Principal,
        leave_id: str,
        new_status: LeaveStatus,
    ) -> LeaveResponse:
        """
        Approve or reject a request and adjust the requester's balance.

        The status change, ``approved_by`` and the balance adjustment are
        committed together or not at all.

        Raises:
            NotFoundError: Unknown request or missing balance
            PermissionDenied: Caller is not the addressed approver, an
                ADMIN or the HOD of the requester's department
            ValidationError: Target status is not APPROVED/REJECTED, or an
                approval would make ``available`` negative
            ConflictError: The request already has ``new_status``
        """
        with UnitOfWork(self._session_factory) as uow:
            leave_repo = uow.get_repo(LeaveRequestRepository)
            leave = leave_repo.get_for_update(leave_id)
            if leave is None:
                raise errors.NotFoundError("LeaveRequest", leave_id, message=Messages.LEAVE_NOT_FOUND)

            requester = leave.user
            is_department_hod = (
                principal.role == RoleName.HOD
                and principal.department is not None
                and requester.department == principal.department
            )
            if not (
                principal.is_admin
                or leave.requested_to_id == principal.user_id
                or is_department_hod
            ):
                raise PermissionDenied(user_id=principal.user_id, role=principal.role)

            old_status = LeaveStatus(leave.status)
            delta = balance_adjustment(
                old_status,
                new_status,
                leave.leave_type,
                leave.start_date,
                leave.end_date,
            )

            balance = uow.get_repo(LeaveBalanceRepository).get_by_user(leave.user_id, for_update=True)
            if balance is None:
                raise errors.NotFoundError("LeaveBalance", leave.user_id)
            if balance.available + delta < 0:
                raise errors.ValidationError(
                    Messages.INSUFFICIENT_BALANCE,
                    field="status",
                    details={"available": balance.available, "required": -delta},
                )

            balance.apply_adjustment(delta)
            leave.status = new_status
            leave.approved_by = uow.get_repo(UserRepository).get(principal.user_id)
            uow.flush()
            response = self._to_response(leave)

        logger.info(
            "leave_status_changed",
            leave_id=leave_id,
            old_status=old_status.value,
            new_status=new_status.value,
            adjustment=delta,
            approved_by=principal.user_id,
        )
        return response

    def edit(self, principal: Principal, leave_id: str, data: LeaveEditRequest) -> LeaveResponse:
        """Replace the fields of a PENDING request; the status is unchanged."""
        self._check_dates(data)

        with UnitOfWork(self._session_factory) as uow:
            leave_repo = uow.get_repo(LeaveRequestRepository)
            leave = leave_repo.get_for_update(leave_id)
            if leave is None:
                raise errors.NotFoundError("LeaveRequest", leave_id, message=Messages.LEAVE_NOT_FOUND)

            require_owner_or_admin(principal, leave.user_id)
            if leave.status != LeaveStatus.PENDING:
                raise errors.ConflictError(Messages.LEAVE_NOT_EDITABLE, conflicting_field="status")

            # Routing is checked against the requester, who may differ from an editing ADMIN
            requester = leave.user
            self._validate_approver(
                uow,
                Principal(
                    user_id=requester.id,
                    email=requester.email,
                    name=requester.name,
                    role=RoleName(requester.role.name),
                    role_id=requester.role_id,
                    department=requester.department,
                ),
                data.requested_to,
            )

            leave = leave_repo.update(
                leave,
                {
                    "requested_to_id": data.requested_to,
                    "start_date": data.start_date,
                    "end_date": data.end_date,
                    "leave_type": data.leave_type,
                    "reason": data.reason,
                },
            )
            uow.session.refresh(leave)
            response = self._to_response(leave)

        logger.info("leave_edited", leave_id=leave_id, edited_by=principal.user_id)
        return response

    def delete(self, principal: Principal, leave_id: str) -> None:
        """
        Delete a request.

        Deleting an APPROVED request returns its days to the balance in
        the same transaction.
        """
        with UnitOfWork(self._session_factory) as uow:
            leave_repo = uow.get_repo(LeaveRequestRepository)
            leave = leave_repo.get_for_update(leave_id)
            if leave is None:
                raise errors.NotFoundError("LeaveRequest", leave_id, message=Messages.LEAVE_NOT_FOUND)

            require_owner_or_admin(principal, leave.user_id)

            restored = restoration_on_delete(
                LeaveStatus(leave.status),
                leave.leave_type,
                leave.start_date,
                leave.end_date,
            )
            if restored:
                balance = uow.get_repo(LeaveBalanceRepository).get_by_user(leave.user_id, for_update=True)
                if balance is not None:
                    balance.apply_adjustment(restored)

            leave_repo.delete(leave)

        logger.info("leave_deleted", leave_id=leave_id, deleted_by=principal.user_id, restored=restored)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def list_personal(
        self,
        principal: Principal,
        user_id: str,
        params: PaginationParams,
        *,
        status: Optional[LeaveStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        approver_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_col: Optional[str] = None,
        sort_dir: str = "desc",
    ) -> PaginatedResponse[LeaveResponse]:
        """Requests made by ``user_id``; students may only list their own."""
        self._require_self_or_approver(principal, user_id)
        self._check_range(date_from, date_to)

        with UnitOfWork(self._session_factory) as uow:
            items, total = uow.get_repo(LeaveRequestRepository).personal(
                user_id,
                status=status,
                date_from=date_from,
                date_to=date_to,
                approver_id=approver_id,
                search=search,
                sort_col=sort_col,
                sort_dir=sort_dir,
                offset=params.offset,
                limit=params.limit,
            )
            return paginate(
                message="Leaves retrieved successfully",
                items=items,
                total=total,
                params=params,
                mapper=self._to_response,
            )

    def list_inbox(
        self,
        principal: Principal,
        params: PaginationParams,
        *,
        show_all: bool = False,
        status: Optional[LeaveStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        approver_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_col: Optional[str] = None,
        sort_dir: str = "desc",
    ) -> PaginatedResponse[LeaveResponse]:
        """Requests the caller may act on, scoped by role."""
        self._check_range(date_from, date_to)
        scope = resolve_inbox_scope(principal, show_all)

        with UnitOfWork(self._session_factory) as uow:
            items, total = uow.get_repo(LeaveRequestRepository).inbox(
                requested_to_id=scope.requested_to_id,
                department=scope.department,
                exclude_user_id=scope.exclude_user_id,
                status=status,
                date_from=date_from,
                date_to=date_to,
                approver_id=approver_id,
                search=search,
                sort_col=sort_col,
                sort_dir=sort_dir,
                offset=params.offset,
                limit=params.limit,
            )
            return paginate(
                message="Leaves retrieved successfully",
                items=items,
                total=total,
                params=params,
                mapper=self._to_response,
            )

    def get_balance(self, principal: Principal, user_id: str) -> LeaveBalanceResponse:
        self._require_self_or_approver(principal, user_id)

        with UnitOfWork(self._session_factory) as uow:
            balance = uow.get_repo(LeaveBalanceRepository).get_by_user(user_id)
            if balance is None:
                raise errors.NotFoundError("LeaveBalance", user_id, message="Leave balance not found")
            return LeaveBalanceResponse.model_validate(balance)

    def list_approvers(self, principal: Principal) -> List[ApproverOption]:
        """Users the caller may address a leave request to."""
        rule = resolve_approver_rule(principal.role, principal.department)

        with UnitOfWork(self._session_factory) as uow:
            users = uow.get_repo(UserRepository).list_by_role(rule.target_role, rule.department)
            return [
                ApproverOption(id=user.id, name=user.name)
                for user in users
                if user.id != principal.user_id
            ]

    def calendar(self) -> List[CalendarEvent]:
        with UnitOfWork(self._session_factory) as uow:
            leaves = uow.get_repo(LeaveRequestRepository).approved_with_requester()
            return [
                CalendarEvent(
                    id=leave.id,
                    title=leave.user.name,
                    start=leave.start_date,
                    end=leave.end_date,
                    calendar_id=leave.leave_type,
                )
                for leave in leaves
            ]

    def chart(self) -> List[ChartEntry]:
        with UnitOfWork(self._session_factory) as uow:
            balances = uow.get_repo(LeaveBalanceRepository).list_for_chart()
            return [
                ChartEntry(
                    user_id=balance.user_id,
                    name=balance.user.name,
                    department=balance.user.department,
                    role=balance.user.role.name if balance.user.role else None,
                    used_leaves=balance.total - balance.available,
                    total_leaves=balance.total,
                )
                for balance in balances
            ]
