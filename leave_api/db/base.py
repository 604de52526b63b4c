"""SQLAlchemy Base class for all models."""
from leave_api.models import Base  # noqa: F401  registers every table on Base.metadata

__all__ = ["Base"]
