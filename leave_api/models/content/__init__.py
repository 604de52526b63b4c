# leave_api/models/content/__init__.py
from .blog_post import BlogPost

__all__ = ["BlogPost"]
