"""
User Repository

Account lookups, approver directory queries and the paginated user
listing used by administrators and HODs.
"""

from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import Select, asc, desc, func, or_, select
from sqlalchemy.orm import Session

from leave_api.models.base.enums import Department, RoleName
from leave_api.models.user.role import Role
from leave_api.models.user.user import User
from leave_api.repositories.base.base_repository import BaseRepository

# Sortable columns for the user listing, keyed by wire name
USER_SORT_COLUMNS = {
    "name": User.name,
    "email": User.email,
    "phone": User.phone,
    "address": User.address,
    "department": User.department,
    "createdAt": User.created_at,
    "role": Role.priority,
}


class RoleRepository(BaseRepository[Role]):
    """Read access to the seeded role table."""

    def __init__(self, session: Session):
        super().__init__(session, Role)

    def get_by_name(self, name: RoleName) -> Optional[Role]:
        stmt = select(Role).where(Role.name == name)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> Sequence[Role]:
        return self.session.execute(select(Role).order_by(Role.priority)).scalars().all()


class UserRepository(BaseRepository[User]):
    """User repository with directory and listing queries."""

    def __init__(self, session: Session):
        super().__init__(session, User)

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return self.session.execute(stmt).unique().scalar_one_or_none()

    def email_taken(self, email: str, *, exclude_id: Optional[str] = None) -> bool:
        stmt = select(func.count(User.id)).where(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt).scalar_one() > 0

    def list_by_role(
        self,
        role_name: RoleName,
        department: Optional[Department] = None,
    ) -> Sequence[User]:
        """
        Users holding ``role_name``, optionally restricted to one department.

        Ordered by name for display in approver pickers.
        """
        stmt = select(User).join(Role, User.role_id == Role.id).where(Role.name == role_name)
        if department is not None:
            stmt = stmt.where(User.department == department)
        stmt = stmt.order_by(User.name)
        return self.session.execute(stmt).unique().scalars().all()

    def search(
        self,
        *,
        exclude_id: str,
        role_id: Optional[str] = None,
        department: Optional[Department] = None,
        search: Optional[str] = None,
        sort_col: Optional[str] = None,
        sort_dir: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Paginated user listing.

        Args:
            exclude_id: Caller id, never part of the result
            role_id: Restrict to one role
            department: Restrict to one department
            search: Case-insensitive match on name, email, phone or address
            sort_col: Wire name of the sort column; unknown names sort by creation date
            sort_dir: ``asc`` or ``desc``
            offset: Rows to skip
            limit: Page size

        Returns:
            Page of users and the total matching the same filters
        """
        conditions: List[Any] = [User.id != exclude_id]
        if role_id:
            conditions.append(User.role_id == role_id)
        if department is not None:
            conditions.append(User.department == department)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    User.name.ilike(pattern),
                    User.email.ilike(pattern),
                    User.phone.ilike(pattern),
                    User.address.ilike(pattern),
                )
            )

        column = USER_SORT_COLUMNS.get(sort_col or "", User.created_at)
        direction = asc if sort_dir == "asc" else desc

        stmt: Select = (
            select(User)
            .join(Role, User.role_id == Role.id)
            .where(*conditions)
            .order_by(direction(column), User.id)
            .offset(offset)
            .limit(limit)
        )
        items = list(self.session.execute(stmt).unique().scalars().all())

        count_stmt = (
            select(func.count(User.id))
            .join(Role, User.role_id == Role.id)
            .where(*conditions)
        )
        total = self.session.execute(count_stmt).scalar_one()
        return items, total

    def list_students(self) -> Sequence[User]:
        stmt = (
            select(User)
            .join(Role, User.role_id == Role.id)
            .where(Role.name == RoleName.STUDENT)
            .order_by(User.name)
        )
        return self.session.execute(stmt).unique().scalars().all()
