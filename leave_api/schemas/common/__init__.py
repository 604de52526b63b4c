"""
Common schema building blocks.
"""

from leave_api.schemas.common.base import BaseResponseSchema, BaseSchema
from leave_api.schemas.common.pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)
from leave_api.schemas.common.response import ErrorResponse, MessageResponse, SuccessResponse

__all__ = [
    "BaseResponseSchema",
    "BaseSchema",
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "ErrorResponse",
    "MessageResponse",
    "SuccessResponse",
]
