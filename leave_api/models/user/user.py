"""
User model configuration.
"""
from sqlalchemy import Column, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from leave_api.models.base.base_model import TimestampModel
from leave_api.models.base.enums import AuthProvider, Department, Gender


class User(TimestampModel):
    """
    Core User entity.

    Holds credentials, role reference and contact details. Every user owns
    exactly one leave balance, created in the same transaction as the user.
    """
    __tablename__ = "users"
    __table_args__ = (
        {"comment": "User accounts for students, staff, HODs and admins"}
    )

    # Authentication & Identity
    email = Column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique email address"
    )
    password = Column(
        String(255),
        nullable=True,
        comment="Bcrypt hashed password (null for OAuth accounts)"
    )
    provider = Column(
        Enum(AuthProvider, name="auth_provider", native_enum=False, length=16),
        nullable=False,
        default=AuthProvider.CREDENTIALS,
        comment="Authentication provider"
    )

    # Profile
    name = Column(
        String(255),
        nullable=False,
        index=True,
        comment="Display name"
    )
    gender = Column(
        Enum(Gender, name="gender", native_enum=False, length=16),
        nullable=True,
        comment="Gender"
    )
    department = Column(
        Enum(Department, name="department", native_enum=False, length=16),
        nullable=True,
        index=True,
        comment="College department"
    )
    phone = Column(
        String(20),
        nullable=True,
        comment="Contact phone number"
    )
    address = Column(
        Text,
        nullable=True,
        comment="Postal address"
    )
    image = Column(
        String(500),
        nullable=True,
        comment="Avatar URL"
    )

    # Role & Access Control
    role_id = Column(
        String(36),
        ForeignKey("roles.id"),
        nullable=False,
        index=True,
        comment="Role reference"
    )

    role = relationship("Role", back_populates="users", lazy="joined")
    leave_balance = relationship(
        "LeaveBalance",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    leave_requests = relationship(
        "LeaveRequest",
        back_populates="user",
        foreign_keys="LeaveRequest.user_id",
        cascade="all, delete-orphan",
    )
    assigned_requests = relationship(
        "LeaveRequest",
        back_populates="requested_to",
        foreign_keys="LeaveRequest.requested_to_id",
    )
    approved_requests = relationship(
        "LeaveRequest",
        back_populates="approved_by",
        foreign_keys="LeaveRequest.approved_by_id",
    )
    blogs = relationship(
        "BlogPost",
        back_populates="author",
        cascade="all, delete-orphan",
    )

    @property
    def role_name(self):
        return self.role.name if self.role is not None else None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
