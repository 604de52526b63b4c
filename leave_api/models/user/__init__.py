"""
User models package.
"""

from leave_api.models.user.role import Role
from leave_api.models.user.user import User

__all__ = ["Role", "User"]
