# leave_api/services/auth/registration_service.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from leave_api.core.constants import AVATAR_URL_TEMPLATE, Messages
from leave_api.core.logging import get_logger
from leave_api.models.base import utcnow
from leave_api.models.base.enums import AuthProvider, Department, Gender, RoleName
from leave_api.models.leave.leave_balance import LeaveBalance
from leave_api.models.user.role import Role
from leave_api.models.user.user import User
from leave_api.repositories.user import RoleRepository, UserRepository
from leave_api.schemas.auth.register import SignupRequest, StudentRegisterRequest
from leave_api.schemas.user import UserResponse
from leave_api.services.common import UnitOfWork, errors
from leave_api.services.common.security import PasswordHasher

logger = get_logger(__name__)


def default_avatar(name: str) -> str:
    initial = name.strip()[:1].upper() or "U"
    return AVATAR_URL_TEMPLATE.format(initial=initial)


class RegistrationService:
    """
    Account creation.

    Every path writes the user and its leave balance in one transaction,
    so a user never exists without a balance.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        hasher: PasswordHasher,
        *,
        leave_quota: float = 30,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._hasher = hasher
        self._leave_quota = leave_quota
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _create(
        self,
        uow: UnitOfWork,
        *,
        role: Role,
        email: str,
        name: str,
        provider: AuthProvider,
        password: Optional[str] = None,
        gender: Optional[Gender] = None,
        department: Optional[Department] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        image: Optional[str] = None,
    ) -> User:
        users = uow.get_repo(UserRepository)
        if users.email_taken(email):
            raise errors.AlreadyExistsError("User", "email", email, message=Messages.USER_EXISTS)

        user = User(
            email=email,
            password=self._hasher.hash(password) if password is not None else None,
            provider=provider,
            name=name,
            gender=gender,
            department=department,
            phone=phone,
            address=address,
            image=image or default_avatar(name),
            role_id=role.id,
        )
        user.role = role
        user.leave_balance = LeaveBalance(
            academic_year=str(self._clock().year),
            total=self._leave_quota,
            available=self._leave_quota,
            used=0,
        )
        uow.session.add(user)
        uow.flush()
        logger.info("user_created", user_id=user.id, role=role.name, provider=provider)
        return user

    def _register(self, uow: UnitOfWork, role: Role, data: StudentRegisterRequest) -> UserResponse:
        user = self._create(
            uow,
            role=role,
            email=data.email,
            password=data.password,
            name=data.name,
            provider=AuthProvider.CREDENTIALS,
            gender=data.gender,
            department=data.department,
            phone=data.phone,
            address=data.address,
        )
        return UserResponse.model_validate(user)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def signup(self, data: SignupRequest) -> UserResponse:
        """
        Create an account with an explicit role.

        Raises:
            AlreadyExistsError: If the email is taken
            ValidationError: If the role id is unknown
        """
        with UnitOfWork(self._session_factory) as uow:
            role = uow.get_repo(RoleRepository).get(data.role_id)
            if role is None:
                raise errors.ValidationError(Messages.USER_ROLE_NOT_FOUND, field="roleId")
            return self._register(uow, role, data)

    def register_student(self, data: StudentRegisterRequest) -> UserResponse:
        """Public self-registration; the STUDENT role is always assigned."""
        with UnitOfWork(self._session_factory) as uow:
            role = uow.get_repo(RoleRepository).get_by_name(RoleName.STUDENT)
            if role is None:
                raise errors.ValidationError(Messages.USER_ROLE_NOT_FOUND, field="roleId")
            return self._register(uow, role, data)

    def find_or_provision_oauth_user(
        self,
        *,
        email: str,
        name: str,
        image: Optional[str] = None,
    ) -> User:
        """
        Return the account for a Google identity, creating it on first sign-in.

        New accounts are CSE students without a password. The returned
        instance is detached and has its role loaded.
        """
        with UnitOfWork(self._session_factory) as uow:
            existing = uow.get_repo(UserRepository).get_by_email(email)
            if existing is not None:
                return existing

            role = uow.get_repo(RoleRepository).get_by_name(RoleName.STUDENT)
            if role is None:
                raise errors.ValidationError(Messages.USER_ROLE_NOT_FOUND, field="roleId")
            return self._create(
                uow,
                role=role,
                email=email,
                name=name or email.split("@", 1)[0],
                provider=AuthProvider.GOOGLE,
                department=Department.CSE,
                image=image,
            )

    def ensure_admin(self, email: str, password: str, name: str = "Administrator") -> bool:
        """
        Create the seed administrator unless the email already exists.

        Returns:
            True when an account was created
        """
        with UnitOfWork(self._session_factory) as uow:
            if uow.get_repo(UserRepository).email_taken(email):
                return False
            role = uow.get_repo(RoleRepository).get_by_name(RoleName.ADMIN)
            if role is None:
                raise errors.ValidationError(Messages.USER_ROLE_NOT_FOUND, field="roleId")
            self._create(
                uow,
                role=role,
                email=email,
                password=password,
                name=name,
                provider=AuthProvider.CREDENTIALS,
                department=Department.ADMIN,
            )
            return True
