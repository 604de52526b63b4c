"""
Authentication schemas package.
"""

from leave_api.schemas.auth.login import (
    LoginData,
    LoginRequest,
    SessionClaims,
    TokenRequest,
    VerifyResponse,
)
from leave_api.schemas.auth.otp import (
    ForgetPasswordRequest,
    MatchOtpRequest,
    ResetPasswordRequest,
)
from leave_api.schemas.auth.register import SignupRequest, StudentRegisterRequest

__all__ = [
    "LoginData",
    "LoginRequest",
    "SessionClaims",
    "TokenRequest",
    "VerifyResponse",
    "ForgetPasswordRequest",
    "MatchOtpRequest",
    "ResetPasswordRequest",
    "SignupRequest",
    "StudentRegisterRequest",
]
