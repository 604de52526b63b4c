"""
Database enums shared by models and schemas.

Values are stored as their upper-case names so that the wire format
and the database agree.
"""

import enum


class RoleName(str, enum.Enum):
    """Fixed user roles, highest priority first."""
    ADMIN = "ADMIN"
    HOD = "HOD"
    STAFF = "STAFF"
    STUDENT = "STUDENT"


class Department(str, enum.Enum):
    """College departments."""
    ADMIN = "ADMIN"
    CSE = "CSE"
    ECE = "ECE"
    EEE = "EEE"
    IT = "IT"
    MECH = "MECH"
    CIVIL = "CIVIL"


class Gender(str, enum.Enum):
    """Gender enumeration."""
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class AuthProvider(str, enum.Enum):
    """How an account authenticates."""
    CREDENTIALS = "CREDENTIALS"
    GOOGLE = "GOOGLE"


class LeaveStatus(str, enum.Enum):
    """Leave request lifecycle status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LeaveType(str, enum.Enum):
    """Kind of leave requested."""
    FULL_DAY = "FULL_DAY"
    HALF_DAY = "HALF_DAY"
    SICK_LEAVE = "SICK_LEAVE"
    CASUAL_LEAVE = "CASUAL_LEAVE"
