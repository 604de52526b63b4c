"""
Leave request database model.
"""

from datetime import date as Date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date as SQLDate, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leave_api.models.base.base_model import TimestampModel
from leave_api.models.base.enums import LeaveStatus, LeaveType

if TYPE_CHECKING:
    from leave_api.models.user.user import User

__all__ = ["LeaveRequest"]


class LeaveRequest(TimestampModel):
    """
    A request for leave routed to a single approver.

    ``requested_to`` is the user the request is addressed to, while
    ``approved_by`` records who actually changed its status last.
    """

    __tablename__ = "leave_requests"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        {"comment": "Leave requests and their approval status"},
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Requester",
    )
    requested_to_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="Approver the request is addressed to",
    )
    approved_by_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="User who last changed the status",
    )

    start_date: Mapped[Date] = mapped_column(
        SQLDate,
        nullable=False,
        index=True,
        comment="First day of leave (inclusive)",
    )
    end_date: Mapped[Date] = mapped_column(
        SQLDate,
        nullable=False,
        comment="Last day of leave (inclusive)",
    )
    leave_type: Mapped[LeaveType] = mapped_column(
        Enum(LeaveType, name="leave_type", native_enum=False, length=16),
        nullable=False,
        comment="Kind of leave",
    )
    reason: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Reason given by the requester",
    )
    status: Mapped[LeaveStatus] = mapped_column(
        Enum(LeaveStatus, name="leave_status", native_enum=False, length=16),
        nullable=False,
        default=LeaveStatus.PENDING,
        index=True,
        comment="Approval status",
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="leave_requests",
        foreign_keys=[user_id],
    )
    requested_to: Mapped["User"] = relationship(
        "User",
        back_populates="assigned_requests",
        foreign_keys=[requested_to_id],
    )
    approved_by: Mapped[Optional["User"]] = relationship(
        "User",
        back_populates="approved_requests",
        foreign_keys=[approved_by_id],
    )

    def __repr__(self) -> str:
        return (
            f"<LeaveRequest(id={self.id}, user_id={self.user_id}, "
            f"status={self.status})>"
        )
