# leave_api/models/content/blog_post.py
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leave_api.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from leave_api.models.user.user import User


class BlogPost(TimestampModel):
    """Blog posts written by users."""
    __tablename__ = "blog_posts"

    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        comment="Author of the post",
    )
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)

    author: Mapped["User"] = relationship("User", back_populates="blogs", lazy="joined")
