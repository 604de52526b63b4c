from .blog import BlogCreate, BlogResponse, BlogUpdate

__all__ = ["BlogCreate", "BlogResponse", "BlogUpdate"]
