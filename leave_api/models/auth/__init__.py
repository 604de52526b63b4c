"""
Authentication models package.
"""

from leave_api.models.auth.otp_code import OneTimeCode

__all__ = ["OneTimeCode"]
