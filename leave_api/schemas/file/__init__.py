"""
File schemas package.
"""

from leave_api.schemas.file.image_upload import ProfileImageResponse

__all__ = ["ProfileImageResponse"]
