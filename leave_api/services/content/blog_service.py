# leave_api/services/content/blog_service.py
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.orm import Session

from leave_api.core.constants import Messages
from leave_api.core.logging import get_logger
from leave_api.models.content.blog_post import BlogPost
from leave_api.repositories.content import BlogRepository
from leave_api.schemas.common.pagination import PaginatedResponse, PaginationParams
from leave_api.schemas.content import BlogCreate, BlogResponse, BlogUpdate
from leave_api.services.common import UnitOfWork, errors
from leave_api.services.common.pagination import paginate
from leave_api.services.common.permissions import (
    PermissionDenied,
    Principal,
    is_resource_owner,
    require_owner_or_admin,
)

logger = get_logger(__name__)


class BlogService:
    """
    Blog posts.

    Anyone holding the blog capability may read and publish; only the
    author edits a post, and the author or an ADMIN deletes it.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _get_or_404(repo: BlogRepository, blog_id: str) -> BlogPost:
        post = repo.get(blog_id)
        if post is None:
            raise errors.NotFoundError("Blog", blog_id, message=Messages.BLOG_NOT_FOUND)
        return post

    def list_posts(
        self,
        params: PaginationParams,
        *,
        search: Optional[str] = None,
    ) -> PaginatedResponse[BlogResponse]:
        with UnitOfWork(self._session_factory) as uow:
            items, total = uow.get_repo(BlogRepository).list_page(
                search=search,
                offset=params.offset,
                limit=params.limit,
            )
            return paginate(
                message="Blogs retrieved successfully",
                items=items,
                total=total,
                params=params,
                mapper=BlogResponse.model_validate,
            )

    def create(self, principal: Principal, data: BlogCreate) -> BlogResponse:
        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(BlogRepository)
            post = repo.create(
                {"author_id": principal.user_id, "title": data.title, "content": data.content}
            )
            uow.session.refresh(post)
            response = BlogResponse.model_validate(post)

        logger.info("blog_created", blog_id=response.id, author_id=principal.user_id)
        return response

    def update(self, principal: Principal, blog_id: str, data: BlogUpdate) -> BlogResponse:
        """
        Raises:
            NotFoundError: Unknown post
            PermissionDenied: Caller is not the author
        """
        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(BlogRepository)
            post = self._get_or_404(repo, blog_id)
            if not is_resource_owner(principal, post.author_id):
                raise PermissionDenied(user_id=principal.user_id, role=principal.role)

            repo.update(post, data.model_dump(exclude_unset=True, exclude_none=True))
            return BlogResponse.model_validate(post)

    def delete(self, principal: Principal, blog_id: str) -> None:
        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(BlogRepository)
            post = self._get_or_404(repo, blog_id)
            require_owner_or_admin(principal, post.author_id)
            repo.delete(post)

        logger.info("blog_deleted", blog_id=blog_id, deleted_by=principal.user_id)
