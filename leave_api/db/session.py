"""Database session management."""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from leave_api.config.settings import Settings


def build_engine(settings: Settings) -> Engine:
    """
    Create the database engine from settings.

    SQLite URLs skip the connection pool options, which the SQLite
    dialect does not accept.
    """
    url = settings.get_database_url()
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_OVERFLOW,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Yield a session and always close it.

    Usage in FastAPI endpoints:
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
