# leave_api/schemas/common/pagination.py
"""
Pagination schemas for page-based responses.
"""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import Field

from leave_api.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "PaginationParams",
    "PaginationMeta",
    "PaginatedResponse",
]


class PaginationParams(BaseSchema):
    """Validated page request."""

    page: int = Field(default=1, description="Page number (1-indexed)")
    limit: int = Field(default=10, description="Items per page")

    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.limit


class PaginationMeta(BaseSchema):
    """Pagination metadata."""

    total: int = Field(..., ge=0, description="Total number of items")
    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total_pages: int = Field(..., ge=0, description="Total number of pages")


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response envelope."""

    message: str = Field(..., description="Response message")
    data: List[T] = Field(..., description="Items of the current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def create(
        cls,
        message: str,
        items: List[T],
        total: int,
        params: PaginationParams,
    ) -> "PaginatedResponse[T]":
        """
        Create paginated response with calculated metadata.

        Args:
            message: Envelope message
            items: List of items for current page
            total: Total number of items across all pages
            params: Page request the items were fetched with

        Returns:
            PaginatedResponse with items and metadata
        """
        total_pages = (total + params.limit - 1) // params.limit
        meta = PaginationMeta(
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=total_pages,
        )
        return cls(message=message, data=items, pagination=meta)
