# leave_api/repositories/content/blog_repository.py
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from leave_api.models.content.blog_post import BlogPost
from leave_api.repositories.base.base_repository import BaseRepository


class BlogRepository(BaseRepository[BlogPost]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, BlogPost)

    def list_page(
        self,
        *,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[BlogPost], int]:
        """Newest posts first, optionally matching title or content."""
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(BlogPost.title.ilike(pattern), BlogPost.content.ilike(pattern)))

        stmt = (
            select(BlogPost)
            .where(*conditions)
            .order_by(BlogPost.created_at.desc(), BlogPost.id)
            .offset(offset)
            .limit(limit)
        )
        items = list(self.session.execute(stmt).unique().scalars().all())
        total = self.session.execute(
            select(func.count(BlogPost.id)).where(*conditions)
        ).scalar_one()
        return items, total
