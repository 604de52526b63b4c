"""
Leave routes.

Applying, editing and deleting requests, approver decisions, the
approver inbox, personal history, balances and the dashboard views.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from leave_api.api.deps import PageParams, get_leave_service, require
from leave_api.core.constants import Messages
from leave_api.models.base.enums import LeaveStatus
from leave_api.schemas.common.pagination import PaginatedResponse
from leave_api.schemas.common.response import MessageResponse, SuccessResponse
from leave_api.schemas.leave import (
    CalendarEvent,
    ChartEntry,
    LeaveApplyRequest,
    LeaveBalanceResponse,
    LeaveEditRequest,
    LeaveResponse,
    LeaveStatusUpdate,
)
from leave_api.schemas.user import ApproverOption
from leave_api.services.common.permissions import Principal
from leave_api.services.leave import LeaveService

router = APIRouter(tags=["leave"])

Service = Annotated[LeaveService, Depends(get_leave_service)]
StatusFilter = Annotated[Optional[LeaveStatus], Query(alias="status")]
Search = Annotated[Optional[str], Query()]
SortCol = Annotated[Optional[str], Query(alias="col")]
SortDir = Annotated[str, Query(alias="sort", pattern="^(asc|desc)$")]
DateFrom = Annotated[Optional[date], Query(alias="from")]
DateTo = Annotated[Optional[date], Query(alias="to")]
ApproverFilter = Annotated[Optional[str], Query(alias="approver")]

INBOX_SHOW_ALL = "all"


@router.post(
    "/apply-leave",
    response_model=SuccessResponse[LeaveResponse],
    status_code=status.HTTP_201_CREATED,
)
def apply_leave(
    data: LeaveApplyRequest,
    principal: Annotated[Principal, Depends(require("leave.apply"))],
    leaves: Service,
):
    return SuccessResponse.create(Messages.LEAVE_CREATED, leaves.apply(principal, data))


@router.patch("/leave/{leave_id}", response_model=SuccessResponse[LeaveResponse])
def update_leave_status(
    leave_id: str,
    data: LeaveStatusUpdate,
    principal: Annotated[Principal, Depends(require("leave.transition"))],
    leaves: Service,
):
    """Approve or reject a request; the requester's balance moves with it."""
    leave = leaves.transition_status(principal, leave_id, data.status)
    return SuccessResponse.create(Messages.LEAVE_UPDATED, leave)


@router.patch("/edit-leave/{leave_id}", response_model=SuccessResponse[LeaveResponse])
def edit_leave(
    leave_id: str,
    data: LeaveEditRequest,
    principal: Annotated[Principal, Depends(require("leave.edit"))],
    leaves: Service,
):
    return SuccessResponse.create(Messages.LEAVE_UPDATED, leaves.edit(principal, leave_id, data))


@router.delete("/delete-leave/{leave_id}", response_model=MessageResponse)
def delete_leave(
    leave_id: str,
    principal: Annotated[Principal, Depends(require("leave.delete"))],
    leaves: Service,
):
    leaves.delete(principal, leave_id)
    return MessageResponse(message=Messages.LEAVE_DELETED)


@router.get("/leaves", response_model=PaginatedResponse[LeaveResponse])
def view_leaves(
    params: PageParams,
    principal: Annotated[Principal, Depends(require("leave.inbox"))],
    leaves: Service,
    leave: Annotated[Optional[str], Query()] = None,
    status_filter: StatusFilter = None,
    date_from: DateFrom = None,
    date_to: DateTo = None,
    approver: ApproverFilter = None,
    search: Search = None,
    col: SortCol = None,
    sort: SortDir = "desc",
):
    """Approver inbox; ``leave=all`` widens the scope for ADMIN and HOD."""
    return leaves.list_inbox(
        principal,
        params,
        show_all=leave == INBOX_SHOW_ALL,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
        approver_id=approver,
        search=search,
        sort_col=col,
        sort_dir=sort,
    )


@router.get("/personal-leaves/{user_id}", response_model=PaginatedResponse[LeaveResponse])
def personal_leaves(
    user_id: str,
    params: PageParams,
    principal: Annotated[Principal, Depends(require("leave.personal"))],
    leaves: Service,
    status_filter: StatusFilter = None,
    date_from: DateFrom = None,
    date_to: DateTo = None,
    approver: ApproverFilter = None,
    search: Search = None,
    col: SortCol = None,
    sort: SortDir = "desc",
):
    return leaves.list_personal(
        principal,
        user_id,
        params,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
        approver_id=approver,
        search=search,
        sort_col=col,
        sort_dir=sort,
    )


@router.get("/leaves-balance/{user_id}", response_model=SuccessResponse[LeaveBalanceResponse])
def leave_balance(
    user_id: str,
    principal: Annotated[Principal, Depends(require("leave.balance"))],
    leaves: Service,
):
    return SuccessResponse.create("Leave balance retrieved", leaves.get_balance(principal, user_id))


@router.get("/staff", response_model=SuccessResponse[List[ApproverOption]])
def approvers(
    principal: Annotated[Principal, Depends(require("leave.approvers"))],
    leaves: Service,
):
    """Users the caller may address a request to."""
    return SuccessResponse.create("Approvers retrieved", leaves.list_approvers(principal))


@router.get("/chart", response_model=SuccessResponse[List[ChartEntry]])
def chart(
    _: Annotated[Principal, Depends(require("leave.chart"))],
    leaves: Service,
):
    return SuccessResponse.create("Leave chart retrieved", leaves.chart())


@router.get("/dashboard", response_model=SuccessResponse[List[CalendarEvent]])
def dashboard(
    _: Annotated[Principal, Depends(require("leave.calendar"))],
    leaves: Service,
):
    return SuccessResponse.create("Approved leaves retrieved", leaves.calendar())
