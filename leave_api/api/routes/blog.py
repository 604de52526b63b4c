"""
Blog routes, mounted under ``/blogs``.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from leave_api.api.deps import PageParams, get_blog_service, require
from leave_api.core.constants import Messages
from leave_api.schemas.common.pagination import PaginatedResponse
from leave_api.schemas.common.response import MessageResponse, SuccessResponse
from leave_api.schemas.content import BlogCreate, BlogResponse, BlogUpdate
from leave_api.services.common.permissions import Principal
from leave_api.services.content import BlogService

router = APIRouter(prefix="/blogs", tags=["blogs"])

Service = Annotated[BlogService, Depends(get_blog_service)]


@router.get("", response_model=PaginatedResponse[BlogResponse])
def list_blogs(
    params: PageParams,
    _: Annotated[Principal, Depends(require("blog.read"))],
    blogs: Service,
    search: Annotated[Optional[str], Query()] = None,
):
    return blogs.list_posts(params, search=search)


@router.post("", response_model=SuccessResponse[BlogResponse], status_code=status.HTTP_201_CREATED)
def create_blog(
    data: BlogCreate,
    principal: Annotated[Principal, Depends(require("blog.write"))],
    blogs: Service,
):
    return SuccessResponse.create(Messages.BLOG_CREATED, blogs.create(principal, data))


@router.patch("/{blog_id}", response_model=SuccessResponse[BlogResponse])
def update_blog(
    blog_id: str,
    data: BlogUpdate,
    principal: Annotated[Principal, Depends(require("blog.write"))],
    blogs: Service,
):
    return SuccessResponse.create(Messages.BLOG_UPDATED, blogs.update(principal, blog_id, data))


@router.delete("/{blog_id}", response_model=MessageResponse)
def delete_blog(
    blog_id: str,
    principal: Annotated[Principal, Depends(require("blog.write"))],
    blogs: Service,
):
    blogs.delete(principal, blog_id)
    return MessageResponse(message=Messages.BLOG_DELETED)
