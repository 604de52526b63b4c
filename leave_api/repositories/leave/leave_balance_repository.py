"""
Leave Balance Repository
"""

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from leave_api.models.leave.leave_balance import LeaveBalance
from leave_api.models.user.user import User
from leave_api.repositories.base.base_repository import BaseRepository


class LeaveBalanceRepository(BaseRepository[LeaveBalance]):
    """Per-user leave balance access."""

    def __init__(self, session: Session):
        super().__init__(session, LeaveBalance)

    def get_by_user(self, user_id: str, *, for_update: bool = False) -> Optional[LeaveBalance]:
        """
        Balance row of ``user_id``.

        Args:
            user_id: Owner of the balance
            for_update: Lock the row until the transaction ends
                (``SELECT ... FOR UPDATE``; ignored by SQLite)
        """
        stmt = select(LeaveBalance).where(LeaveBalance.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_chart(self) -> Sequence[LeaveBalance]:
        """Every balance with its owner, least available first."""
        stmt = (
            select(LeaveBalance)
            .options(joinedload(LeaveBalance.user).joinedload(User.role))
            .order_by(LeaveBalance.available.asc(), LeaveBalance.user_id)
        )
        return self.session.execute(stmt).unique().scalars().all()
