# leave_api/services/common/__init__.py
"""
Shared service-layer infrastructure.

- **UnitOfWork**: Transaction boundary & repository factory
- **security**: Password hashing (bcrypt) and JWT session tokens
- **permissions**: Capability table, principals and the access guard
- **pagination**: Page validation and paginated response builders
- **errors**: Service-layer exception hierarchy

Example usage:
    >>> from leave_api.services.common import UnitOfWork, permissions
    >>>
    >>> with UnitOfWork(session_factory) as uow:
    ...     user = uow.get_repo(UserRepository).get(user_id)
    >>>
    >>> guard = permissions.AccessGuard(jwt_settings, session_factory)
    >>> principal = guard.check(token, "leave.apply")
"""
from __future__ import annotations

from . import errors, pagination, permissions, security
from .unit_of_work import TransactionError, UnitOfWork

__all__ = [
    "errors",
    "pagination",
    "permissions",
    "security",
    "TransactionError",
    "UnitOfWork",
]
