"""
Authentication repositories package.
"""

from leave_api.repositories.auth.otp_code_repository import OneTimeCodeRepository

__all__ = ["OneTimeCodeRepository"]
