"""
Role reference table.
"""
from sqlalchemy import Column, Enum, Integer
from sqlalchemy.orm import relationship

from leave_api.models.base.base_model import BaseModel
from leave_api.models.base.enums import RoleName


class Role(BaseModel):
    """
    Fixed role reference data.

    Rows are seeded at database initialisation with ids "1".."4" and
    never modified afterwards. A lower priority value outranks a higher one.
    """
    __tablename__ = "roles"
    __table_args__ = (
        {"comment": "Seeded user roles"}
    )

    name = Column(
        Enum(RoleName, name="role_name", native_enum=False, length=16),
        unique=True,
        nullable=False,
        comment="Role name"
    )
    priority = Column(
        Integer,
        nullable=False,
        comment="Role priority (1 = highest)"
    )

    users = relationship("User", back_populates="role")

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"


__all__ = ["Role"]
