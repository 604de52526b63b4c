# leave_api/services/users/user_service.py
from __future__ import annotations

from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from leave_api.core.constants import Messages
from leave_api.core.logging import get_logger
from leave_api.models.base.enums import Department, LeaveStatus
from leave_api.models.user.user import User
from leave_api.repositories.leave import LeaveRequestRepository
from leave_api.repositories.user import RoleRepository, UserRepository
from leave_api.schemas.common.pagination import PaginatedResponse, PaginationParams
from leave_api.schemas.user import (
    DashboardStats,
    ProfileUpdateRequest,
    UserResponse,
    UserUpdateRequest,
)
from leave_api.services.common import UnitOfWork, errors
from leave_api.services.common.pagination import paginate
from leave_api.services.common.permissions import Principal

logger = get_logger(__name__)

ALL_ROLES_FILTER = "All"


class UserService:
    """
    Account directory:

    - Administrator updates and deletes
    - Paginated user listing scoped by the caller's department
    - Student directory, own profile edits and dashboard counters
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _get_or_404(repo: UserRepository, user_id: str) -> User:
        user = repo.get(user_id)
        if user is None:
            raise errors.NotFoundError("User", user_id, message=Messages.USER_NOT_FOUND)
        return user

    # ------------------------------------------------------------------ #
    # Administration
    # ------------------------------------------------------------------ #
    def update_user(self, user_id: str, data: UserUpdateRequest) -> UserResponse:
        """
        Partially update any account.

        Raises:
            NotFoundError: Unknown user
            AlreadyExistsError: New email belongs to another account
            ValidationError: Unknown role id
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(UserRepository)
            user = self._get_or_404(repo, user_id)

            email = changes.get("email")
            if email and repo.email_taken(email, exclude_id=user_id):
                raise errors.AlreadyExistsError("User", "email", email, message=Messages.USER_EXISTS)

            role_id = changes.get("role_id")
            if role_id is not None:
                role = uow.get_repo(RoleRepository).get(role_id)
                if role is None:
                    raise errors.ValidationError(Messages.USER_ROLE_NOT_FOUND, field="roleId")
                user.role = role

            repo.update(user, changes)
            uow.flush()
            response = UserResponse.model_validate(user)

        logger.info("user_updated", user_id=user_id, fields=sorted(changes))
        return response

    def delete_user(self, user_id: str) -> None:
        """
        Delete an account with its balance, its own requests and posts.

        Requests made by other users stay untouched, so an account that
        still has requests addressed to it cannot be deleted.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If requests are addressed to the user
        """
        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(UserRepository)
            user = self._get_or_404(repo, user_id)
            addressed = uow.get_repo(LeaveRequestRepository).count({"requested_to_id": user_id})
            if addressed:
                raise errors.ConflictError(
                    Messages.USER_HAS_ASSIGNED_LEAVES,
                    details={"assignedRequests": addressed},
                )
            repo.delete(user)
        logger.info("user_deleted", user_id=user_id)

    def list_users(
        self,
        principal: Principal,
        params: PaginationParams,
        *,
        role_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_col: Optional[str] = None,
        sort_dir: str = "desc",
    ) -> PaginatedResponse[UserResponse]:
        """
        Users other than the caller.

        Callers outside the ADMIN department only see their own department.
        ``role_id`` of ``"All"`` (or empty) lists every role.
        """
        department = None
        if principal.department != Department.ADMIN:
            department = principal.department
        if role_id == ALL_ROLES_FILTER:
            role_id = None

        with UnitOfWork(self._session_factory) as uow:
            items, total = uow.get_repo(UserRepository).search(
                exclude_id=principal.user_id,
                role_id=role_id,
                department=department,
                search=search,
                sort_col=sort_col,
                sort_dir=sort_dir,
                offset=params.offset,
                limit=params.limit,
            )
            return paginate(
                message=Messages.USERS_RETRIEVED,
                items=items,
                total=total,
                params=params,
                mapper=UserResponse.model_validate,
            )

    def list_students(self) -> List[UserResponse]:
        with UnitOfWork(self._session_factory) as uow:
            students = uow.get_repo(UserRepository).list_students()
            return [UserResponse.model_validate(user) for user in students]

    # ------------------------------------------------------------------ #
    # Self service
    # ------------------------------------------------------------------ #
    def update_profile(self, principal: Principal, data: ProfileUpdateRequest) -> UserResponse:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(UserRepository)
            user = self._get_or_404(repo, principal.user_id)
            repo.update(user, changes)
            uow.flush()
            return UserResponse.model_validate(user)

    def dashboard_stats(self) -> DashboardStats:
        with UnitOfWork(self._session_factory) as uow:
            counts = uow.get_repo(LeaveRequestRepository).count_by_status()
            total_users = uow.get_repo(UserRepository).count()
            return DashboardStats(
                pending=counts[LeaveStatus.PENDING],
                approved=counts[LeaveStatus.APPROVED],
                rejected=counts[LeaveStatus.REJECTED],
                total_users=total_users,
                total_leaves=sum(counts.values()),
            )
