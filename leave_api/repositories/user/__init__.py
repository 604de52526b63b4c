"""
User repositories package.
"""

from leave_api.repositories.user.user_repository import (
    USER_SORT_COLUMNS,
    RoleRepository,
    UserRepository,
)

__all__ = ["USER_SORT_COLUMNS", "RoleRepository", "UserRepository"]
