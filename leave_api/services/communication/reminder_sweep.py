"""
Daily maintenance sweep.

Emails every approver who is owed pending leave requests, then purges
expired password reset codes. One failed delivery never stops the rest
of the sweep.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leave_api.core.logging import get_logger
from leave_api.models.base import utcnow
from leave_api.repositories.auth import OneTimeCodeRepository
from leave_api.repositories.leave import LeaveRequestRepository
from leave_api.services.common import UnitOfWork

from .email_service import EmailError, EmailMessage, Mailer
from .templates import PENDING_REMINDER_SUBJECT, render_pending_reminder

logger = get_logger(__name__)


@dataclass
class SweepResult:
    notified: int = 0
    failed: List[str] = field(default_factory=list)
    purged: int = 0


class ReminderSweep:
    """Pending-request reminders plus OTP cleanup."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        mailer: Mailer,
        *,
        leave_management_url: str,
        otp_validity_minutes: int = 10,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._mailer = mailer
        self._leave_management_url = leave_management_url
        self._otp_validity = timedelta(minutes=otp_validity_minutes)
        self._clock = clock

    def _pending_recipients(self) -> List[Tuple[str, int]]:
        with UnitOfWork(self._session_factory) as uow:
            rows = uow.get_repo(LeaveRequestRepository).pending_by_approver()
            return [(user.email, count) for user, count in rows]

    def notify_approvers(self, result: SweepResult) -> None:
        for email, count in self._pending_recipients():
            bodies = render_pending_reminder(count, self._leave_management_url)
            try:
                self._mailer.send(
                    EmailMessage(
                        subject=PENDING_REMINDER_SUBJECT,
                        to=[email],
                        body_text=bodies["text"],
                        body_html=bodies["html"],
                    )
                )
            except EmailError as exc:
                logger.warning("pending_reminder_failed", recipient=email, error=str(exc))
                result.failed.append(email)
                continue
            result.notified += 1

    def purge_expired_codes(self, result: SweepResult) -> None:
        cutoff = self._clock() - self._otp_validity
        try:
            with UnitOfWork(self._session_factory) as uow:
                result.purged = uow.get_repo(OneTimeCodeRepository).delete_issued_before(cutoff)
        except SQLAlchemyError as exc:
            logger.error("otp_purge_failed", error=str(exc))

    def run(self) -> SweepResult:
        result = SweepResult()
        self.notify_approvers(result)
        self.purge_expired_codes(result)
        logger.info(
            "reminder_sweep_finished",
            notified=result.notified,
            failed=len(result.failed),
            purged=result.purged,
        )
        return result
