# leave_api/services/auth/auth_service.py
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.orm import Session

from leave_api.core.constants import Messages
from leave_api.core.logging import get_logger
from leave_api.models.base.enums import AuthProvider, RoleName
from leave_api.models.user.user import User
from leave_api.repositories.user import UserRepository
from leave_api.schemas.auth.login import LoginData, LoginRequest, SessionClaims
from leave_api.schemas.user import UserResponse
from leave_api.services.common import UnitOfWork, errors, security
from leave_api.services.common.permissions import Principal

logger = get_logger(__name__)


class AuthService:
    """
    Authentication service:

    - Email/password login issuing a session token
    - Token verification returning its identity claims
    - Profile of the authenticated caller

    Accounts created through Google have no password and can only sign in
    through the OAuth flow.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        jwt_settings: security.JWTSettings,
        hasher: security.PasswordHasher,
    ) -> None:
        self._session_factory = session_factory
        self._jwt_settings = jwt_settings
        self._hasher = hasher

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _claims_for(user: User) -> SessionClaims:
        return SessionClaims(
            id=user.id,
            email=user.email,
            role=RoleName(user.role.name),
            role_id=user.role_id,
            name=user.name,
            image=user.image,
        )

    def issue_token(self, user: User) -> LoginData:
        """Sign a session token for ``user``."""
        claims = self._claims_for(user)
        token = security.create_access_token(
            claims=claims.model_dump(by_alias=True, mode="json"),
            jwt_settings=self._jwt_settings,
        )
        return LoginData(token=token, user=claims)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #
    def login(self, data: LoginRequest) -> LoginData:
        """
        Email/password login.

        Raises:
            NotFoundError: If no account has this email
            AuthenticationError: If the password does not match, or the
                account was created through Google
        """
        with UnitOfWork(self._session_factory) as uow:
            user = uow.get_repo(UserRepository).get_by_email(data.email)
            if user is None:
                raise errors.NotFoundError("User", data.email, message=Messages.USER_NOT_FOUND)

            if user.provider != AuthProvider.CREDENTIALS or not self._hasher.verify(
                data.password, user.password
            ):
                logger.info("login_failed", user_id=user.id)
                raise errors.AuthenticationError(Messages.INVALID_PASSWORD)

            logger.info("login_succeeded", user_id=user.id)
            return self.issue_token(user)

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #
    def verify(self, token: Optional[str]) -> SessionClaims:
        """
        Decode ``token`` and return its identity claims.

        Raises:
            AuthenticationError: If the token is missing, invalid or expired
        """
        if not token:
            raise errors.AuthenticationError(Messages.TOKEN_NOT_FOUND)
        payload = security.decode_token(token, self._jwt_settings)
        return SessionClaims.model_validate(payload)

    def whoami(self, principal: Principal) -> UserResponse:
        with UnitOfWork(self._session_factory) as uow:
            user = uow.get_repo(UserRepository).get(principal.user_id)
            if user is None:
                raise errors.NotFoundError("User", principal.user_id, message=Messages.USER_NOT_FOUND)
            return UserResponse.model_validate(user)
