"""
User-facing services.

- UserService:
    Administrator CRUD, department-scoped listing, student directory,
    own profile updates and dashboard counters.
"""

from .user_service import UserService

__all__ = [
    "UserService",
]
