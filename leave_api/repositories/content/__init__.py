# leave_api/repositories/content/__init__.py
from .blog_repository import BlogRepository

__all__ = ["BlogRepository"]
