"""
File service layer: profile picture hosting.
"""

from leave_api.services.file.image_service import (
    CloudinaryImageStore,
    ImageStore,
    ImageStoreError,
    ProfileImageService,
    StoredImage,
    cloudinary_public_id,
)

__all__ = [
    "CloudinaryImageStore",
    "ImageStore",
    "ImageStoreError",
    "ProfileImageService",
    "StoredImage",
    "cloudinary_public_id",
]
