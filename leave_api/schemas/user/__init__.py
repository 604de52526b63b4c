"""
User schemas package.
"""

from leave_api.schemas.user.user_base import ProfileUpdateRequest, UserUpdateRequest
from leave_api.schemas.user.user_response import (
    ApproverOption,
    DashboardStats,
    UserResponse,
    UserSummary,
)

__all__ = [
    "ProfileUpdateRequest",
    "UserUpdateRequest",
    "ApproverOption",
    "DashboardStats",
    "UserResponse",
    "UserSummary",
]
