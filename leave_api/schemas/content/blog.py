# leave_api/schemas/content/blog.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, model_validator

from leave_api.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = ["BlogCreate", "BlogUpdate", "BlogResponse"]


class BlogCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)


class BlogUpdate(BaseSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)


class BlogResponse(BaseResponseSchema):
    """Blog post with the author name flattened in."""

    title: str
    content: str
    author_id: str
    author_name: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_author(cls, data: Any) -> Any:
        author = getattr(data, "author", None)
        if author is None:
            return data
        return {
            "id": data.id,
            "title": data.title,
            "content": data.content,
            "author_id": data.author_id,
            "author_name": author.name,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }
