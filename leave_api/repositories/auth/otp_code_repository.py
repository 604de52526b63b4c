"""
One-time code repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from leave_api.models.auth.otp_code import OneTimeCode
from leave_api.repositories.base.base_repository import BaseRepository


class OneTimeCodeRepository(BaseRepository[OneTimeCode]):
    """Password reset code storage."""

    def __init__(self, session: Session):
        super().__init__(session, OneTimeCode)

    def find(self, email: str, code: str) -> Optional[OneTimeCode]:
        """Emails compare case-insensitively, like account lookups."""
        stmt = select(OneTimeCode).where(
            func.lower(OneTimeCode.email) == email.lower(),
            OneTimeCode.code == code,
        )
        return self.session.execute(stmt).scalars().first()

    def delete_for_email(self, email: str) -> int:
        result = self.session.execute(
            delete(OneTimeCode).where(func.lower(OneTimeCode.email) == email.lower())
        )
        return result.rowcount or 0

    def delete_issued_before(self, cutoff: datetime) -> int:
        """Remove every code issued strictly before ``cutoff``."""
        result = self.session.execute(
            delete(OneTimeCode).where(OneTimeCode.issued_at < cutoff)
        )
        return result.rowcount or 0
