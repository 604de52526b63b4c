"""
Profile image upload schemas.
"""

from pydantic import Field

from leave_api.schemas.common.base import BaseSchema

__all__ = ["ProfileImageResponse"]


class ProfileImageResponse(BaseSchema):
    """Hosted URL of the newly stored avatar."""

    image_url: str = Field(..., description="Public URL of the uploaded image")
