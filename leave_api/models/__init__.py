# leave_api/models/__init__.py
"""
Database models.

Importing this package registers every table on ``Base.metadata``.
"""
from .base import Base, BaseModel, TimestampModel
from .base.enums import (
    AuthProvider,
    Department,
    Gender,
    LeaveStatus,
    LeaveType,
    RoleName,
)
from .user import Role, User
from .leave import LeaveBalance, LeaveRequest
from .auth import OneTimeCode
from .content import BlogPost

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "AuthProvider",
    "Department",
    "Gender",
    "LeaveStatus",
    "LeaveType",
    "RoleName",
    "Role",
    "User",
    "LeaveBalance",
    "LeaveRequest",
    "OneTimeCode",
    "BlogPost",
]
