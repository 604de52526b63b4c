# leave_api/services/common/errors.py
"""
Service-layer exceptions.

These exceptions are raised by service methods and are translated into
HTTP responses by the exception handlers registered on the application.
"""
from __future__ import annotations

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        resource_type: str,
        identifier: str | int | None = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        if message is None:
            message = f"{resource_type} not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(ServiceError):
    """Raised when business logic validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class AuthenticationError(ServiceError):
    """Raised when the caller cannot be authenticated."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Raised when a user lacks permission for an action."""

    def __init__(
        self,
        message: str = "Authorization failed",
        required_permission: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.required_permission = required_permission


class ConflictError(ServiceError):
    """Raised when an operation conflicts with current state."""

    def __init__(
        self,
        message: str,
        conflicting_field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.conflicting_field = conflicting_field


class AlreadyExistsError(ConflictError):
    """Raised when attempting to create a resource that already exists."""

    def __init__(
        self,
        resource_type: str,
        field: str,
        value: Any,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        if message is None:
            message = f"{resource_type} with {field}='{value}' already exists"
        super().__init__(message, conflicting_field=field, details=details)
        self.resource_type = resource_type
        self.field = field
        self.value = value
