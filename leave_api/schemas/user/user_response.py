# leave_api/schemas/user/user_response.py
"""
User response schemas.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from leave_api.models.base.enums import AuthProvider, Department, Gender, RoleName
from leave_api.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "UserResponse",
    "UserSummary",
    "ApproverOption",
    "DashboardStats",
]


def _role_name(value: Any) -> Any:
    # ORM rows carry the Role object; the wire carries its name
    return getattr(value, "name", value)


class UserResponse(BaseResponseSchema):
    """Full user profile; never includes the password hash."""

    email: str
    name: str
    gender: Optional[Gender] = None
    department: Optional[Department] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    image: Optional[str] = None
    provider: AuthProvider
    role_id: str
    role: Optional[RoleName] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_from_relationship(cls, v: Any) -> Any:
        return _role_name(v)


class UserSummary(BaseSchema):
    """Compact user reference embedded in other resources."""

    id: str
    name: str
    email: str
    image: Optional[str] = None
    department: Optional[Department] = None


class ApproverOption(BaseSchema):
    """Entry of the approver picker."""

    id: str
    name: str


class DashboardStats(BaseSchema):
    pending: int = Field(..., ge=0)
    approved: int = Field(..., ge=0)
    rejected: int = Field(..., ge=0)
    total_users: int = Field(..., ge=0)
    total_leaves: int = Field(..., ge=0)
