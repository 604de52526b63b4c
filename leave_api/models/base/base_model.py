"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and the abstract base classes shared by
every table: a string UUID primary key and automatic timestamps.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String, event
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Abstract base for every table; subclasses name their own table."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Primary key (UUID)",
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampModel(BaseModel):
    """Adds created_at / updated_at, both stored in UTC."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )


@event.listens_for(TimestampModel, "before_update", propagate=True)
def _touch_updated_at(mapper, connection, target):
    target.updated_at = utcnow()
