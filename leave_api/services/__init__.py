# leave_api/services/__init__.py
"""
Service layer root package.

Each subpackage implements application use-cases on top of:

- SQLAlchemy models (leave_api.models.*)
- Repositories (leave_api.repositories.*)
- Pydantic schemas (leave_api.schemas.*)
- Common service infrastructure (leave_api.services.common.*)

Typical pattern for a service:

    class SomeService:
        def __init__(self, session_factory: Callable[[], Session]) -> None:
            self._session_factory = session_factory

        def some_use_case(...):
            with UnitOfWork(self._session_factory) as uow:
                repo = uow.get_repo(SomeRepository)
                ...
"""

from leave_api.services.common import UnitOfWork, errors, pagination, permissions, security

__all__ = [
    "UnitOfWork",
    "errors",
    "pagination",
    "permissions",
    "security",
]
