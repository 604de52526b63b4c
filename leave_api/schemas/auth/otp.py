# leave_api/schemas/auth/otp.py
"""
Password reset OTP schemas.
Pydantic v2 compliant.
"""

from pydantic import EmailStr, Field

from leave_api.schemas.common.base import BaseSchema

__all__ = [
    "ForgetPasswordRequest",
    "MatchOtpRequest",
    "ResetPasswordRequest",
]


class ForgetPasswordRequest(BaseSchema):
    """Request a reset code for an account email."""

    email: EmailStr = Field(..., description="Account email address")


class MatchOtpRequest(BaseSchema):
    """Check a reset code without consuming it."""

    email: EmailStr = Field(..., description="Account email address")
    otp: str = Field(
        ...,
        pattern=r"^\d{4}$",
        description="Four digit code from the email",
        examples=["4821"],
    )


class ResetPasswordRequest(MatchOtpRequest):
    """
    Set a new password.

    The code is checked again and consumed on success.
    """

    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="New password",
    )
