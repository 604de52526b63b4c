# leave_api/services/common/security.py
"""
Security utilities for authentication.

Provides password hashing with bcrypt and JWT session token management
with validation and error handling. Both are configured from settings at
application start and stored on the application state.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from leave_api.core.constants import Messages

from .errors import AuthenticationError, ValidationError


# ------------------------------------------------------------------ #
# Configuration
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class JWTSettings:
    """
    JWT configuration settings.

    Example:
        >>> jwt_settings = JWTSettings(
        ...     secret_key=settings.JWT_SECRET_KEY,
        ...     algorithm="HS256",
        ...     access_token_expires_minutes=60 * 24,
        ... )
    """
    secret_key: str
    algorithm: str = "HS256"
    access_token_expires_minutes: int = 60 * 24

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("JWT secret_key cannot be empty")
        if self.access_token_expires_minutes <= 0:
            raise ValueError("access_token_expires_minutes must be positive")


# ------------------------------------------------------------------ #
# Password hashing
# ------------------------------------------------------------------ #

def _prepare_password_for_bcrypt(password: str) -> str:
    """
    Prepare a password for bcrypt by handling the 72-byte limit.

    Passwords that would exceed the limit are replaced by their SHA-256
    hex digest, which is well under it.
    """
    if len(password.encode('utf-8')) > 71:
        return hashlib.sha256(password.encode('utf-8')).hexdigest()
    return password


class PasswordHasher:
    """
    bcrypt password hashing with a configurable work factor.

    Example:
        >>> hasher = PasswordHasher(rounds=settings.PASSWORD_BCRYPT_ROUNDS)
        >>> stored = hasher.hash("secure_password123")
        >>> hasher.verify("secure_password123", stored)
        True
    """

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Raises:
            ValidationError: If password is empty
        """
        if not password:
            raise ValidationError("Password cannot be empty", field="password")
        return self._context.hash(_prepare_password_for_bcrypt(password))

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Return True if ``plain_password`` matches the stored hash."""
        if not plain_password or not hashed_password:
            return False
        try:
            return self._context.verify(
                _prepare_password_for_bcrypt(plain_password),
                hashed_password,
            )
        except ValueError:
            # Malformed or foreign hash
            return False


# ------------------------------------------------------------------ #
# JWT utilities
# ------------------------------------------------------------------ #

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenDecodeError(AuthenticationError):
    """Raised when JWT token decoding fails."""

    def __init__(self, message: str = Messages.TOKEN_NOT_VALID) -> None:
        super().__init__(message)


class TokenExpiredError(TokenDecodeError):
    """Raised when JWT token has expired."""

    def __init__(self) -> None:
        super().__init__("Token has expired")


def create_access_token(
    *,
    claims: dict[str, Any],
    jwt_settings: JWTSettings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed JWT session token.

    Args:
        claims: Identity claims to embed (id, email, role, roleId, name, image)
        jwt_settings: JWT configuration
        expires_delta: Custom expiry (overrides default)

    Returns:
        Encoded JWT token string
    """
    now = _utcnow()
    if expires_delta is None:
        expires_delta = timedelta(minutes=jwt_settings.access_token_expires_minutes)

    payload: dict[str, Any] = dict(claims)
    payload.update(
        {
            "sub": str(claims["id"]),
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
            "type": "access",
        }
    )
    return jwt.encode(payload, jwt_settings.secret_key, algorithm=jwt_settings.algorithm)


def decode_token(token: str, jwt_settings: JWTSettings) -> dict[str, Any]:
    """
    Decode and validate a JWT session token.

    Raises:
        TokenExpiredError: If token has expired
        TokenDecodeError: If token is invalid or lacks a user id
    """
    try:
        payload = jwt.decode(
            token,
            jwt_settings.secret_key,
            algorithms=[jwt_settings.algorithm],
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise TokenDecodeError() from exc

    if payload.get("type") != "access" or not payload.get("id"):
        raise TokenDecodeError()
    return payload
