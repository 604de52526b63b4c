# leave_api/schemas/auth/register.py
"""
Account creation schemas.
Pydantic v2 compliant.
"""

from __future__ import annotations

from pydantic import EmailStr, Field

from leave_api.models.base.enums import Department, Gender
from leave_api.schemas.common.base import BaseSchema

__all__ = [
    "StudentRegisterRequest",
    "SignupRequest",
]


class StudentRegisterRequest(BaseSchema):
    """
    Public self-registration.

    The STUDENT role is always assigned.
    """

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6, max_length=128, description="Password")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    gender: Gender = Field(..., description="Gender")
    phone: str = Field(..., min_length=1, max_length=20, description="Phone number")
    address: str = Field(..., min_length=1, description="Postal address")
    department: Department = Field(..., description="Department")


class SignupRequest(StudentRegisterRequest):
    """Administrator-created account with an explicit role."""

    role_id: str = Field(..., min_length=1, description="Role identifier (\"1\"..\"4\")")
