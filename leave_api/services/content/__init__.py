"""
Content services.

- BlogService: paginated listing, publishing, author edits and deletes.
"""

from .blog_service import BlogService

__all__ = [
    "BlogService",
]
