# leave_api/services/common/pagination.py
"""
Pagination utilities for service layer.

Provides helpers to validate page requests and build paginated
responses from repository results.
"""
from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from leave_api.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Messages,
)
from leave_api.schemas.common.pagination import PaginatedResponse, PaginationParams

from .errors import ValidationError

TModel = TypeVar("TModel")
TSchema = TypeVar("TSchema")


class PaginationError(ValidationError):
    """Raised when pagination parameters are invalid."""


def build_page_params(
    page: int | None = DEFAULT_PAGE,
    limit: int | None = DEFAULT_PAGE_SIZE,
) -> PaginationParams:
    """
    Validate raw page/limit values.

    Missing values take the defaults (page 1, limit 10).

    Raises:
        PaginationError: If page or limit is below 1 or limit exceeds the cap
    """
    page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_PAGE_SIZE if limit is None else limit

    if page < 1 or limit < 1 or limit > MAX_PAGE_SIZE:
        raise PaginationError(
            Messages.INVALID_PAGINATION,
            field="page" if page < 1 else "limit",
            details={"page": page, "limit": limit, "maxLimit": MAX_PAGE_SIZE},
        )
    return PaginationParams(page=page, limit=limit)


def paginate(
    *,
    message: str,
    items: Sequence[TModel],
    total: int,
    params: PaginationParams,
    mapper: Callable[[TModel], TSchema],
) -> PaginatedResponse[TSchema]:
    """
    Build a paginated response from models.

    Args:
        message: Envelope message
        items: Current page of ORM model instances
        total: Total count across all pages
        params: Pagination parameters
        mapper: Function to convert model to schema

    Returns:
        PaginatedResponse containing schemas and metadata
    """
    return PaginatedResponse.create(
        message=message,
        items=[mapper(item) for item in items],
        total=total,
        params=params,
    )
