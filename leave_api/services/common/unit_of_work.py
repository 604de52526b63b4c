# leave_api/services/common/unit_of_work.py
"""
Unit of Work pattern implementation.

One UnitOfWork is one database transaction: repositories obtained from it
share a session, the session commits when the block exits cleanly and
rolls back when anything is raised inside it.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leave_api.core.logging import get_logger
from leave_api.repositories.base import BaseRepository

from .errors import ServiceError

logger = get_logger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


class TransactionError(ServiceError):
    """Raised when a database transaction fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message, details={"error_type": type(original_error).__name__})
        self.original_error = original_error


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Transaction scope for the service layer.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     leave_repo = uow.get_repo(LeaveRequestRepository)
        ...     leave = leave_repo.get(leave_id)
        ...     leave.status = LeaveStatus.APPROVED
        ...     # committed on exit

    Exceptions raised inside the block roll the transaction back and
    propagate unchanged.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self.session: Optional[Session] = None
        self._repos: dict[Type[BaseRepository], BaseRepository] = {}

    def __enter__(self) -> "UnitOfWork":
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")
        self.session = self._session_factory()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        session = self.session
        if session is None:
            return False

        try:
            if exc_type is not None:
                session.rollback()
                logger.debug("uow_rolled_back", reason=exc_type.__name__)
                return False
            try:
                session.commit()
            except SQLAlchemyError as exc:
                logger.error("uow_commit_failed", error=str(exc))
                session.rollback()
                raise TransactionError("Failed to commit transaction", exc) from exc
        finally:
            session.close()
            self.session = None
            self._repos.clear()
        return False

    def flush(self) -> None:
        """
        Send pending changes to the database without committing.

        Used to surface constraint violations and generated keys early.
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.flush() called outside of context")
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            logger.error("uow_flush_failed", error=str(exc))
            raise TransactionError("Failed to flush changes", exc) from exc

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """Return the repository of `repo_cls` bound to this transaction's session."""
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")
        repo = self._repos.get(repo_cls)
        if repo is None:
            repo = repo_cls(self.session)
            self._repos[repo_cls] = repo
        return repo  # type: ignore[return-value]
