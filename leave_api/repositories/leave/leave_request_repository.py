"""
Leave Request Repository

Inbox and personal listings with search, status, date and approver
filters and allow-listed sorting, plus the aggregate queries behind the
dashboard and the daily reminder sweep.
"""

from datetime import date as Date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Select, asc, desc, func, or_, select
from sqlalchemy.orm import Session, aliased, contains_eager

from leave_api.models.base.enums import Department, LeaveStatus
from leave_api.models.leave.leave_request import LeaveRequest
from leave_api.models.user.user import User
from leave_api.repositories.base.base_repository import BaseRepository

Requester = aliased(User, name="requester")
Target = aliased(User, name="requested_to")
Approver = aliased(User, name="approver")

# Sortable columns, keyed by wire name
INBOX_SORT_COLUMNS = {
    "name": Requester.name,
    "email": Requester.email,
    "requestedTo": Target.name,
    "startDate": LeaveRequest.start_date,
    "endDate": LeaveRequest.end_date,
    "status": LeaveRequest.status,
    "reason": LeaveRequest.reason,
    "approvedBy": Approver.name,
    "leaveType": LeaveRequest.leave_type,
}

PERSONAL_SORT_COLUMNS = {
    "startDate": LeaveRequest.start_date,
    "endDate": LeaveRequest.end_date,
    "status": LeaveRequest.status,
    "requestedTo": Target.name,
    "approvedBy": Approver.name,
}


class LeaveRequestRepository(BaseRepository[LeaveRequest]):
    """
    Leave request repository.

    Listing queries join the requester, the addressed approver and the
    actual approver through aliases so that search and sort can reach
    their names, and populate the relationships from the same join.
    """

    def __init__(self, session: Session):
        super().__init__(session, LeaveRequest)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _join_people(stmt: Select) -> Select:
        return (
            stmt.join(Requester, LeaveRequest.user_id == Requester.id)
            .join(Target, LeaveRequest.requested_to_id == Target.id)
            .outerjoin(Approver, LeaveRequest.approved_by_id == Approver.id)
        )

    def _page(
        self,
        conditions: List[Any],
        order: List[Any],
        offset: int,
        limit: int,
    ) -> Tuple[List[LeaveRequest], int]:
        stmt = (
            self._join_people(select(LeaveRequest))
            .options(
                contains_eager(LeaveRequest.user.of_type(Requester)),
                contains_eager(LeaveRequest.requested_to.of_type(Target)),
                contains_eager(LeaveRequest.approved_by.of_type(Approver)),
            )
            .where(*conditions)
            .order_by(*order)
            .offset(offset)
            .limit(limit)
        )
        items = list(self.session.execute(stmt).unique().scalars().all())

        count_stmt = self._join_people(
            select(func.count(LeaveRequest.id)).select_from(LeaveRequest)
        ).where(*conditions)
        total = self.session.execute(count_stmt).scalar_one()
        return items, total

    @staticmethod
    def _common_conditions(
        status: Optional[LeaveStatus],
        date_from: Optional[Date],
        date_to: Optional[Date],
        approver_id: Optional[str],
    ) -> List[Any]:
        conditions: List[Any] = []
        if status is not None:
            conditions.append(LeaveRequest.status == status)
        # Overlap with the inclusive [date_from, date_to] window
        if date_from is not None:
            conditions.append(LeaveRequest.end_date >= date_from)
        if date_to is not None:
            conditions.append(LeaveRequest.start_date <= date_to)
        if approver_id is not None:
            conditions.append(
                or_(
                    LeaveRequest.requested_to_id == approver_id,
                    LeaveRequest.approved_by_id == approver_id,
                )
            )
        return conditions

    # ------------------------------------------------------------------ #
    # Listings
    # ------------------------------------------------------------------ #
    def get_for_update(self, leave_id: str) -> Optional[LeaveRequest]:
        """Load and lock a request row until the transaction ends."""
        stmt = select(LeaveRequest).where(LeaveRequest.id == leave_id).with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def inbox(
        self,
        *,
        requested_to_id: Optional[str] = None,
        department: Optional[Department] = None,
        exclude_user_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        date_from: Optional[Date] = None,
        date_to: Optional[Date] = None,
        approver_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_col: Optional[str] = None,
        sort_dir: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[LeaveRequest], int]:
        """
        Requests visible to an approver.

        Args:
            requested_to_id: Only requests addressed to this user
            department: Only requests from users of this department
            exclude_user_id: Drop requests made by this user
            status: Status filter
            date_from: Only requests ending on or after this day
            date_to: Only requests starting on or before this day
            approver_id: Only requests addressed to or decided by this user
            search: Case-insensitive match on requester name/email and reason
            sort_col: Wire name of the sort column; unknown names sort by creation date descending
            sort_dir: ``asc`` or ``desc``
            offset: Rows to skip
            limit: Page size

        Returns:
            Page of requests and the total matching the same filters
        """
        conditions = self._common_conditions(status, date_from, date_to, approver_id)
        if requested_to_id is not None:
            conditions.append(LeaveRequest.requested_to_id == requested_to_id)
        if department is not None:
            conditions.append(Requester.department == department)
        if exclude_user_id is not None:
            conditions.append(LeaveRequest.user_id != exclude_user_id)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    Requester.name.ilike(pattern),
                    Requester.email.ilike(pattern),
                    LeaveRequest.reason.ilike(pattern),
                )
            )

        column = INBOX_SORT_COLUMNS.get(sort_col or "")
        if column is None:
            order = [desc(LeaveRequest.created_at)]
        else:
            order = [asc(column) if sort_dir == "asc" else desc(column)]
        order.append(LeaveRequest.id)
        return self._page(conditions, order, offset, limit)

    def personal(
        self,
        user_id: str,
        *,
        status: Optional[LeaveStatus] = None,
        date_from: Optional[Date] = None,
        date_to: Optional[Date] = None,
        approver_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_col: Optional[str] = None,
        sort_dir: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[LeaveRequest], int]:
        """
        Requests made by ``user_id``.

        Takes the same status, date and approver filters as :meth:`inbox`.
        Search covers the addressed approver's name, the actual approver's
        name and the reason. Unknown sort columns sort by creation date in
        the requested direction.
        """
        conditions = self._common_conditions(status, date_from, date_to, approver_id)
        conditions.append(LeaveRequest.user_id == user_id)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    Target.name.ilike(pattern),
                    Approver.name.ilike(pattern),
                    LeaveRequest.reason.ilike(pattern),
                )
            )

        column = PERSONAL_SORT_COLUMNS.get(sort_col or "", LeaveRequest.created_at)
        order = [asc(column) if sort_dir == "asc" else desc(column), LeaveRequest.id]
        return self._page(conditions, order, offset, limit)

    def approved_with_requester(self) -> Sequence[LeaveRequest]:
        stmt = (
            select(LeaveRequest)
            .join(Requester, LeaveRequest.user_id == Requester.id)
            .options(contains_eager(LeaveRequest.user.of_type(Requester)))
            .where(LeaveRequest.status == LeaveStatus.APPROVED)
            .order_by(LeaveRequest.start_date)
        )
        return self.session.execute(stmt).unique().scalars().all()

    # ------------------------------------------------------------------ #
    # Aggregates
    # ------------------------------------------------------------------ #
    def count_by_status(self) -> Dict[LeaveStatus, int]:
        stmt = select(LeaveRequest.status, func.count(LeaveRequest.id)).group_by(
            LeaveRequest.status
        )
        counts = {status: 0 for status in LeaveStatus}
        for status, total in self.session.execute(stmt).all():
            counts[LeaveStatus(status)] = total
        return counts

    def pending_by_approver(self) -> List[Tuple[User, int]]:
        """Approvers owed at least one pending request, with the count."""
        pending = (
            select(
                LeaveRequest.requested_to_id.label("approver_id"),
                func.count(LeaveRequest.id).label("pending"),
            )
            .where(LeaveRequest.status == LeaveStatus.PENDING)
            .group_by(LeaveRequest.requested_to_id)
            .subquery()
        )
        stmt = (
            select(User, pending.c.pending)
            .join(pending, pending.c.approver_id == User.id)
            .order_by(User.email)
        )
        return [(user, count) for user, count in self.session.execute(stmt).unique().all()]
