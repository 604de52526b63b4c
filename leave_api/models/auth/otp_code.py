"""
One-time password reset codes.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from leave_api.models.base.base_model import BaseModel, utcnow

__all__ = ["OneTimeCode"]


class OneTimeCode(BaseModel):
    """
    Four digit code emailed for password resets.

    At most one row exists per email; issuing a new code removes the
    previous one. Rows older than the validity window are purged by the
    daily sweep.
    """

    __tablename__ = "one_time_codes"
    __table_args__ = (
        Index("idx_one_time_codes_issued_at", "issued_at"),
        {"comment": "Password reset one-time codes"},
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Email address the code was sent to",
    )
    code: Mapped[str] = mapped_column(
        String(4),
        nullable=False,
        comment="Four digit code",
    )
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="Issuance timestamp (UTC)",
    )

    def __repr__(self) -> str:
        return f"<OneTimeCode(email={self.email}, issued_at={self.issued_at})>"
