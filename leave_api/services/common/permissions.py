# leave_api/services/common/permissions.py
"""
Permission and authorization utilities.

Role checks are declared once in ``CAPABILITIES``, a mapping from a
capability key to the roles allowed to use it. ``AccessGuard`` turns a
session token into a ``Principal`` and checks it against that table.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Mapping, Optional

from sqlalchemy.orm import Session

from leave_api.core.constants import Messages
from leave_api.models.base.enums import Department, RoleName
from leave_api.repositories.user.user_repository import UserRepository

from .errors import AuthenticationError, AuthorizationError
from .security import JWTSettings, decode_token
from .unit_of_work import UnitOfWork

ALL_ROLES: FrozenSet[RoleName] = frozenset(RoleName)
APPROVER_ROLES: FrozenSet[RoleName] = frozenset({RoleName.ADMIN, RoleName.HOD, RoleName.STAFF})

CAPABILITIES: Mapping[str, FrozenSet[RoleName]] = {
    # accounts
    "user.create": frozenset({RoleName.ADMIN}),
    "user.update": frozenset({RoleName.ADMIN}),
    "user.delete": frozenset({RoleName.ADMIN}),
    "user.list": frozenset({RoleName.ADMIN, RoleName.HOD}),
    "student.list": frozenset({RoleName.ADMIN, RoleName.STUDENT}),
    "profile.read": ALL_ROLES,
    "profile.update": ALL_ROLES,
    "profile.image": ALL_ROLES,
    "dashboard.stats": ALL_ROLES,
    # leave
    "leave.apply": ALL_ROLES,
    "leave.edit": ALL_ROLES,
    "leave.delete": ALL_ROLES,
    "leave.transition": APPROVER_ROLES,
    "leave.inbox": APPROVER_ROLES,
    "leave.personal": ALL_ROLES,
    "leave.balance": ALL_ROLES,
    "leave.approvers": ALL_ROLES,
    "leave.calendar": ALL_ROLES,
    "leave.chart": frozenset({RoleName.ADMIN}),
    # blog
    "blog.read": frozenset({RoleName.ADMIN, RoleName.STUDENT}),
    "blog.write": frozenset({RoleName.ADMIN, RoleName.STUDENT}),
}


class PermissionDenied(AuthorizationError):
    """Raised when a user lacks required permissions."""

    def __init__(
        self,
        message: str = Messages.FORBIDDEN,
        user_id: Optional[str] = None,
        role: Optional[RoleName] = None,
        required_permission: Optional[str] = None,
    ) -> None:
        super().__init__(message, required_permission=required_permission)
        self.user_id = user_id
        self.role = role


@dataclass(frozen=True)
class Principal:
    """
    Represents an authenticated user in the service layer.

    Built from the stored user row, not from token claims, so role and
    department changes take effect on the next request.
    """
    user_id: str
    email: str
    name: str
    role: RoleName
    role_id: str
    department: Optional[Department] = None
    image: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN


def is_resource_owner(principal: Principal, resource_owner_id: str) -> bool:
    return principal.user_id == resource_owner_id


def require_owner_or_admin(
    principal: Principal,
    resource_owner_id: str,
    *,
    error_message: Optional[str] = None,
) -> None:
    """
    Assert that principal owns a resource or is an administrator.

    Raises:
        PermissionDenied: If principal is neither
    """
    if not (principal.is_admin or is_resource_owner(principal, resource_owner_id)):
        raise PermissionDenied(
            error_message or Messages.FORBIDDEN,
            user_id=principal.user_id,
            role=principal.role,
        )


class AccessGuard:
    """
    Resolves a session token to a principal and enforces capabilities.

    Example:
        >>> guard = AccessGuard(jwt_settings, session_factory)
        >>> principal = guard.check(token, "leave.inbox")
    """

    def __init__(
        self,
        jwt_settings: JWTSettings,
        session_factory: Callable[[], Session],
        capabilities: Mapping[str, FrozenSet[RoleName]] = CAPABILITIES,
    ) -> None:
        self.jwt_settings = jwt_settings
        self.session_factory = session_factory
        self.capabilities = capabilities

    def authenticate(self, token: Optional[str]) -> Principal:
        """
        Resolve ``token`` to the stored user.

        Raises:
            AuthenticationError: If the token is missing, invalid, expired
                or names a user that no longer exists
        """
        if not token:
            raise AuthenticationError(Messages.TOKEN_NOT_FOUND)

        claims = decode_token(token, self.jwt_settings)

        with UnitOfWork(self.session_factory) as uow:
            user = uow.get_repo(UserRepository).get(str(claims["id"]))
            if user is None:
                raise AuthenticationError(Messages.TOKEN_NOT_VALID)
            return Principal(
                user_id=user.id,
                email=user.email,
                name=user.name,
                role=RoleName(user.role.name),
                role_id=user.role_id,
                department=user.department,
                image=user.image,
            )

    def authorize(self, principal: Principal, capability: str) -> None:
        """
        Raises:
            PermissionDenied: If the principal's role is not allowed
            KeyError: If ``capability`` is not declared
        """
        allowed = self.capabilities[capability]
        if principal.role not in allowed:
            raise PermissionDenied(
                Messages.FORBIDDEN,
                user_id=principal.user_id,
                role=principal.role,
                required_permission=capability,
            )

    def check(self, token: Optional[str], capability: str) -> Principal:
        principal = self.authenticate(token)
        self.authorize(principal, capability)
        return principal
