# leave_api/schemas/common/response.py
"""
Standard API response envelopes.
"""

from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import Field

from leave_api.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "SuccessResponse",
    "MessageResponse",
    "ErrorResponse",
]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    message: str = Field(..., description="Response message")
    data: Union[T, None] = Field(default=None, description="Response data")

    @classmethod
    def create(cls, message: str, data: Union[T, None] = None):
        return cls(message=message, data=data)


class MessageResponse(BaseSchema):
    """Response carrying only a message."""

    message: str = Field(..., description="Response message")


class ErrorResponse(BaseSchema):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    details: Optional[Any] = Field(default=None, description="Error details")
