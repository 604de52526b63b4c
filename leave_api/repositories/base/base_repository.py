# leave_api/repositories/base/base_repository.py
from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from leave_api.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with common CRUD and query helpers.

    Does not commit or roll back; the unit of work manages transactions.
    """

    def __init__(self, session: Session, model: Type[ModelType]):
        self.session = session
        self.model = model

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _base_select(self) -> Select[tuple[ModelType]]:
        return select(self.model)

    def _apply_filters(
        self,
        stmt: Select,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Select:
        if not filters:
            return stmt

        for key, value in filters.items():
            if value is None:
                continue
            column = getattr(self.model, key, None)
            if column is None:
                continue

            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(value))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _count(self, stmt: Select) -> int:
        """Count the rows a select would return, ignoring order/limit."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return self.session.execute(count_stmt).scalar_one()

    # ------------------------------------------------------------------ #
    # Basic CRUD
    # ------------------------------------------------------------------ #
    def get(self, id_: str) -> Optional[ModelType]:
        stmt = self._base_select().where(self.model.id == id_)
        return self.session.execute(stmt).unique().scalar_one_or_none()

    def get_multi(
        self,
        *,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[Any]] = None,
    ) -> Sequence[ModelType]:
        stmt = self._apply_filters(self._base_select(), filters)

        if order_by:
            stmt = stmt.order_by(*order_by)
        if skip:
            stmt = stmt.offset(skip)
        if limit:
            stmt = stmt.limit(limit)

        return self.session.execute(stmt).unique().scalars().all()

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = self._apply_filters(select(func.count(self.model.id)), filters)
        return self.session.execute(stmt).scalar_one()

    def create(self, obj_in: Dict[str, Any] | ModelType) -> ModelType:
        if isinstance(obj_in, self.model):
            db_obj = obj_in
        else:
            db_obj = self.model(**obj_in)  # type: ignore[arg-type]
        self.session.add(db_obj)
        # flush to populate PK
        self.session.flush()
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        for field, value in obj_in.items():
            if hasattr(db_obj, field) and field != "id":
                setattr(db_obj, field, value)
        self.session.flush()
        return db_obj

    def delete(self, db_obj: ModelType) -> None:
        self.session.delete(db_obj)
        self.session.flush()
