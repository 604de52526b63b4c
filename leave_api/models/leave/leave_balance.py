"""
Leave balance database model.

Tracks the yearly leave entitlement of a user together with the
available and used day counts. Half days are allowed, so the counts
are stored as floats.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leave_api.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from leave_api.models.user.user import User

__all__ = ["LeaveBalance"]


class LeaveBalance(TimestampModel):
    """
    Current leave balance of one user.

    Exactly one row exists per user. ``available`` and ``used`` always
    move in opposite directions by the same amount.
    """

    __tablename__ = "leave_balances"
    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_leave_balance_total_non_negative"),
        CheckConstraint("available >= 0", name="ck_leave_balance_available_non_negative"),
        {"comment": "Per-user leave entitlement and usage"},
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
        comment="Owner of the balance",
    )
    academic_year: Mapped[str] = mapped_column(
        String(9),
        nullable=False,
        comment="Academic year label, e.g. 2024",
    )
    total: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Total leave days granted for the year",
    )
    available: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Leave days still available",
    )
    used: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0,
        comment="Leave days consumed by approved requests",
    )

    user: Mapped["User"] = relationship("User", back_populates="leave_balance")

    def apply_adjustment(self, delta: float) -> None:
        """
        Move ``delta`` days into ``available`` and the inverse into ``used``.

        Args:
            delta: Signed change to the available day count
        """
        self.available = self.available + delta
        self.used = self.used - delta

    def __repr__(self) -> str:
        return (
            f"<LeaveBalance(user_id={self.user_id}, available={self.available}, "
            f"used={self.used}, total={self.total})>"
        )
