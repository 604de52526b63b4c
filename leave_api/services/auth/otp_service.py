# leave_api/services/auth/otp_service.py
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from leave_api.core.constants import OTP_MAX, OTP_MIN, Messages
from leave_api.core.logging import get_logger
from leave_api.models.auth.otp_code import OneTimeCode
from leave_api.models.base import utcnow
from leave_api.repositories.auth import OneTimeCodeRepository
from leave_api.repositories.user import UserRepository
from leave_api.schemas.auth.otp import ForgetPasswordRequest, MatchOtpRequest, ResetPasswordRequest
from leave_api.services.common import UnitOfWork, errors
from leave_api.services.common.security import PasswordHasher
from leave_api.services.communication import (
    EmailError,
    EmailMessage,
    Mailer,
    OTP_SUBJECT,
    render_otp,
)

logger = get_logger(__name__)


def generate_code() -> str:
    """Uniformly random four digit code."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OTPService:
    """
    Password reset through emailed one-time codes.

    - One live code per email; issuing a new one replaces the old
    - Codes are valid for ``validity_minutes`` after issuance
    - Matching does not consume a code; a successful reset does
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        mailer: Mailer,
        hasher: PasswordHasher,
        *,
        validity_minutes: int = 10,
        clock: Callable[[], datetime] = utcnow,
        code_factory: Callable[[], str] = generate_code,
    ) -> None:
        self._session_factory = session_factory
        self._mailer = mailer
        self._hasher = hasher
        self._validity = timedelta(minutes=validity_minutes)
        self._clock = clock
        self._code_factory = code_factory

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _matching_code(self, uow: UnitOfWork, email: str, code: str) -> OneTimeCode:
        otp = uow.get_repo(OneTimeCodeRepository).find(email, code)
        if otp is None:
            raise errors.NotFoundError("OneTimeCode", email, message=Messages.INVALID_OTP)
        if self._clock() - _as_utc(otp.issued_at) > self._validity:
            raise errors.ValidationError(Messages.OTP_EXPIRED, field="otp")
        return otp

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def issue(self, data: ForgetPasswordRequest) -> None:
        """
        Generate, store and email a reset code.

        The code is committed before the email goes out; if delivery fails
        the stored code is removed again.

        Raises:
            NotFoundError: If no account has this email
            EmailError: If the code cannot be delivered
        """
        code = self._code_factory()
        with UnitOfWork(self._session_factory) as uow:
            user = uow.get_repo(UserRepository).get_by_email(data.email)
            if user is None:
                raise errors.NotFoundError("User", data.email, message=Messages.USER_NOT_FOUND)

            email = user.email
            repo = uow.get_repo(OneTimeCodeRepository)
            repo.delete_for_email(email)
            repo.create(OneTimeCode(email=email, code=code, issued_at=self._clock()))

        try:
            self._mailer.send(
                EmailMessage(subject=OTP_SUBJECT, to=[email], body_text=render_otp(code))
            )
        except EmailError:
            self._discard(email, code)
            raise
        logger.info("otp_issued", email=email)

    def _discard(self, email: str, code: str) -> None:
        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(OneTimeCodeRepository)
            otp = repo.find(email, code)
            if otp is not None:
                repo.delete(otp)
        logger.warning("otp_discarded_undeliverable", email=email)

    def match(self, data: MatchOtpRequest) -> None:
        """
        Raises:
            NotFoundError: If the (email, code) pair is unknown
            ValidationError: If the code has expired
        """
        with UnitOfWork(self._session_factory) as uow:
            self._matching_code(uow, data.email, data.otp)

    def reset_password(self, data: ResetPasswordRequest) -> None:
        """
        Check the code again, store the new password and consume the code.

        Raises:
            NotFoundError: Unknown code or account
            ValidationError: If the code has expired
        """
        with UnitOfWork(self._session_factory) as uow:
            otp = self._matching_code(uow, data.email, data.otp)

            user = uow.get_repo(UserRepository).get_by_email(data.email)
            if user is None:
                raise errors.NotFoundError("User", data.email, message=Messages.USER_NOT_FOUND)

            user.password = self._hasher.hash(data.password)
            uow.get_repo(OneTimeCodeRepository).delete(otp)
        logger.info("password_reset", user_id=user.id)
