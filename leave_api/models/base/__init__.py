"""
Base models package.

Provides the declarative base, abstract base classes and enums
for all database models.
"""

from leave_api.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    utcnow,
)
from leave_api.models.base.enums import (
    AuthProvider,
    Department,
    Gender,
    LeaveStatus,
    LeaveType,
    RoleName,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "utcnow",
    "AuthProvider",
    "Department",
    "Gender",
    "LeaveStatus",
    "LeaveType",
    "RoleName",
]
