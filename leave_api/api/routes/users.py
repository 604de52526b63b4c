"""
Account routes: administrator user management, student registration,
directory listings and own-profile updates.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from leave_api.api.deps import (
    PageParams,
    get_registration_service,
    get_user_service,
    require,
)
from leave_api.core.constants import Messages
from leave_api.schemas.auth import SignupRequest, StudentRegisterRequest
from leave_api.schemas.common.pagination import PaginatedResponse
from leave_api.schemas.common.response import MessageResponse, SuccessResponse
from leave_api.schemas.user import (
    DashboardStats,
    ProfileUpdateRequest,
    UserResponse,
    UserUpdateRequest,
)
from leave_api.services.auth import RegistrationService
from leave_api.services.common.permissions import Principal
from leave_api.services.users import UserService

router = APIRouter(tags=["users"])

SortDir = Annotated[str, Query(alias="sort", pattern="^(asc|desc)$")]


# --- Administration ------------------------------------------------------------

@router.post(
    "/signup",
    response_model=SuccessResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def signup(
    data: SignupRequest,
    _: Annotated[Principal, Depends(require("user.create"))],
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
):
    return SuccessResponse.create(Messages.USER_CREATED, registration.signup(data))


@router.patch("/user/{user_id}", response_model=SuccessResponse[UserResponse])
def update_user(
    user_id: str,
    data: UserUpdateRequest,
    _: Annotated[Principal, Depends(require("user.update"))],
    users: Annotated[UserService, Depends(get_user_service)],
):
    return SuccessResponse.create(Messages.USER_UPDATED, users.update_user(user_id, data))


@router.delete("/user/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    _: Annotated[Principal, Depends(require("user.delete"))],
    users: Annotated[UserService, Depends(get_user_service)],
):
    users.delete_user(user_id)
    return MessageResponse(message=Messages.USER_DELETED)


@router.post("/users", response_model=PaginatedResponse[UserResponse])
def list_users(
    params: PageParams,
    principal: Annotated[Principal, Depends(require("user.list"))],
    users: Annotated[UserService, Depends(get_user_service)],
    role_id: Annotated[Optional[str], Query(alias="roleID")] = None,
    search: Annotated[Optional[str], Query()] = None,
    col: Annotated[Optional[str], Query()] = None,
    sort: SortDir = "desc",
):
    """Paginated listing of everyone but the caller, with search and sort."""
    return users.list_users(
        principal,
        params,
        role_id=role_id,
        search=search,
        sort_col=col,
        sort_dir=sort,
    )


@router.get("/student", response_model=SuccessResponse[List[UserResponse]])
def list_students(
    _: Annotated[Principal, Depends(require("student.list"))],
    users: Annotated[UserService, Depends(get_user_service)],
):
    return SuccessResponse.create("Students retrieved successfully", users.list_students())


@router.get("/dashboard-stats", response_model=SuccessResponse[DashboardStats])
def dashboard_stats(
    _: Annotated[Principal, Depends(require("dashboard.stats"))],
    users: Annotated[UserService, Depends(get_user_service)],
):
    return SuccessResponse.create("Dashboard statistics retrieved", users.dashboard_stats())


# --- Self service --------------------------------------------------------------

@router.post(
    "/register",
    response_model=SuccessResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(
    data: StudentRegisterRequest,
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
):
    return SuccessResponse.create(Messages.STUDENT_CREATED, registration.register_student(data))


@router.patch("/update-profile", response_model=SuccessResponse[UserResponse])
def update_profile(
    data: ProfileUpdateRequest,
    principal: Annotated[Principal, Depends(require("profile.update"))],
    users: Annotated[UserService, Depends(get_user_service)],
):
    return SuccessResponse.create(Messages.USER_UPDATED, users.update_profile(principal, data))
