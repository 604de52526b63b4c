# leave_api/schemas/auth/login.py
"""
Login and session schemas.
Pydantic v2 compliant.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from leave_api.models.base.enums import RoleName
from leave_api.schemas.common.base import BaseSchema

__all__ = [
    "LoginRequest",
    "SessionClaims",
    "LoginData",
    "TokenRequest",
    "VerifyResponse",
]


class LoginRequest(BaseSchema):
    """Email/password login request."""

    email: EmailStr = Field(
        ...,
        description="User email address",
        examples=["user@example.com"],
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="User password",
    )


class SessionClaims(BaseSchema):
    """Identity claims carried by the session token."""

    id: str
    email: str
    role: RoleName
    role_id: str
    name: str
    image: Optional[str] = None


class LoginData(BaseSchema):
    token: str = Field(..., description="Signed session token")
    user: SessionClaims


class TokenRequest(BaseSchema):
    """Body of ``/verify`` and ``/me``; falls back to cookie or header."""

    token: Optional[str] = Field(default=None, description="Session token")


class VerifyResponse(BaseSchema):
    authenticated: bool
    user: Optional[SessionClaims] = None
