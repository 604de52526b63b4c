# leave_api/db/init_db.py
"""Database initialization utilities."""
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from leave_api.core.constants import ROLE_SEED
from leave_api.core.logging import get_logger
from leave_api.db.base import Base
from leave_api.models.base.enums import RoleName
from leave_api.models.user.role import Role
from leave_api.repositories.user import RoleRepository
from leave_api.services.auth import RegistrationService
from leave_api.services.common import UnitOfWork

logger = get_logger(__name__)


def create_tables(engine: Engine) -> None:
    """
    Create all tables that do not exist yet.

    Note: This is suitable for development and testing. Schema changes
    on an existing database need a migration tool.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("database_tables_ready", tables=len(Base.metadata.tables))


def seed_roles(session_factory: Callable[[], Session]) -> int:
    """Insert the fixed roles that are missing. Returns how many were added."""
    added = 0
    with UnitOfWork(session_factory) as uow:
        repo = uow.get_repo(RoleRepository)
        for role_id, name, priority in ROLE_SEED:
            if repo.get(role_id) is None:
                repo.create(Role(id=role_id, name=RoleName(name), priority=priority))
                added += 1
    if added:
        logger.info("roles_seeded", added=added)
    return added


def init_db(
    engine: Engine,
    session_factory: Callable[[], Session],
    *,
    create: bool = True,
    registration: Optional[RegistrationService] = None,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> None:
    """
    Prepare the database: tables, roles and an optional administrator.
    """
    if create:
        create_tables(engine)
    seed_roles(session_factory)

    if registration is not None and admin_email and admin_password:
        if registration.ensure_admin(admin_email, admin_password):
            logger.info("admin_seeded", email=admin_email)
