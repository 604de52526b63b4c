# leave_api/schemas/common/base.py
"""
Base schema classes with common fields and configurations.

Every schema speaks camelCase on the wire while keeping snake_case
attribute names in Python.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "BaseSchema",
    "BaseResponseSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this to get camelCase
    aliases and ORM attribute loading.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=False,
        str_strip_whitespace=True,
    )


class BaseResponseSchema(BaseSchema):
    """Base schema for database entities with ID and timestamps."""

    id: str = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
