# leave_api/core/constants.py
"""
Core application constants.

These values centralize common configuration-like constants such as:
- Pagination defaults.
- Session cookie attributes.
- Fixed role identifiers seeded into the roles table.
- User-facing messages returned in response envelopes.
"""

from __future__ import annotations

# Pagination defaults
DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 10
MAX_PAGE_SIZE: int = 100

# Session cookie
SESSION_COOKIE_NAME: str = "token"
SESSION_COOKIE_MAX_AGE_SECONDS: int = 86_400

# Common HTTP header names
HEADER_REQUEST_ID: str = "X-Request-ID"
HEADER_TOKEN: str = "token"

# Role reference data: (id, name, priority); lower priority value outranks higher
ROLE_SEED: tuple[tuple[str, str, int], ...] = (
    ("1", "ADMIN", 1),
    ("2", "HOD", 2),
    ("3", "STAFF", 3),
    ("4", "STUDENT", 4),
)

AVATAR_URL_TEMPLATE: str = "https://avatar.vercel.sh/{initial}"
OTP_MIN: int = 1000
OTP_MAX: int = 9999
ALLOWED_IMAGE_TYPES: frozenset[str] = frozenset({"image/jpeg", "image/png"})


class Messages:
    """User-facing messages shared by services and routers."""

    INTERNAL_SERVER_ERROR = "Internal server error"
    UNAUTHORIZED = "Unauthorized"
    TOKEN_NOT_FOUND = "Access denied. No token provided."
    TOKEN_NOT_VALID = "Token not valid"
    FORBIDDEN = "Access forbidden. Insufficient permissions."
    INVALID_INPUT = "Invalid input"
    INVALID_PAGINATION = "Invalid pagination parameters"

    USER_EXISTS = "User already exists"
    USER_ROLE_NOT_FOUND = "User role not found"
    USER_NOT_FOUND = "User not found"
    INVALID_PASSWORD = "Invalid password"
    LOGIN_SUCCESSFUL = "Login successful"
    LOGOUT_SUCCESSFUL = "Logged out successfully"
    USER_CREATED = "User created"
    STUDENT_CREATED = "Student created"
    USER_UPDATED = "User updated successfully"
    USER_DELETED = "Deleted successfully"
    USERS_RETRIEVED = "Users retrieved successfully"
    USER_HAS_ASSIGNED_LEAVES = "User still has leave requests addressed to them"

    INVALID_OTP = "Invalid OTP"
    OTP_SENT = "OTP sent successfully"
    OTP_MATCHED = "OTP matched successfully"
    OTP_EXPIRED = "OTP expired"
    PASSWORD_UPDATED = "Password updated"

    LEAVE_NOT_FOUND = "Leave not found"
    LEAVE_CREATED = "Leave created"
    LEAVE_UPDATED = "Leave updated"
    LEAVE_DELETED = "Leave deleted"
    LEAVE_STATUS_UNCHANGED = "Leave already has this status"
    LEAVE_NOT_EDITABLE = "Only pending leave requests can be edited"
    INSUFFICIENT_BALANCE = "Insufficient leave balance"
    INVALID_APPROVER = "Requested approver cannot approve this leave"

    BLOG_NOT_FOUND = "Blog not found"
    BLOG_CREATED = "Blog created successfully"
    BLOG_UPDATED = "Blog updated successfully"
    BLOG_DELETED = "Blog deleted successfully"

    IMAGE_UPLOADED = "File uploaded to Cloudinary and URL stored successfully"
    INVALID_IMAGE = "Only JPEG and PNG files are allowed"
