# leave_api/schemas/user/user_base.py
"""
User update schemas.

Every field is optional; only the fields present in the request body
are written.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from leave_api.models.base.enums import Department, Gender
from leave_api.schemas.common.base import BaseSchema

__all__ = [
    "UserUpdateRequest",
    "ProfileUpdateRequest",
]


class ProfileUpdateRequest(BaseSchema):
    """Fields a user may change on their own profile."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    gender: Optional[Gender] = None
    phone: Optional[str] = Field(default=None, min_length=1, max_length=20)
    address: Optional[str] = Field(default=None, min_length=1)


class UserUpdateRequest(ProfileUpdateRequest):
    """Administrator update of any account."""

    email: Optional[EmailStr] = None
    role_id: Optional[str] = Field(default=None, min_length=1)
    department: Optional[Department] = None
