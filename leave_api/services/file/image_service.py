# leave_api/services/file/image_service.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol
from urllib.parse import urlparse

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from sqlalchemy.orm import Session

from leave_api.config.settings import Settings
from leave_api.core.constants import ALLOWED_IMAGE_TYPES, Messages
from leave_api.core.logging import get_logger
from leave_api.repositories.user import UserRepository
from leave_api.services.common import UnitOfWork, errors
from leave_api.services.common.permissions import Principal

logger = get_logger(__name__)

_VERSION_SEGMENT = re.compile(r"^v\d+$")


class ImageStoreError(errors.ServiceError):
    """Raised when the image host rejects an upload."""


@dataclass(frozen=True)
class StoredImage:
    url: str
    public_id: str


class ImageStore(Protocol):
    def upload(self, data: bytes, *, folder: str) -> StoredImage: ...

    def destroy(self, public_id: str) -> None: ...


def cloudinary_public_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the public id from a Cloudinary delivery URL.

    ``https://res.cloudinary.com/<cloud>/image/upload/v17/profile_images/abc.jpg``
    yields ``profile_images/abc``. Returns None for any other URL.
    """
    if not url:
        return None
    parsed = urlparse(url)
    if not parsed.netloc.endswith("cloudinary.com"):
        return None

    parts = [p for p in parsed.path.split("/") if p]
    try:
        idx = parts.index("upload")
    except ValueError:
        return None
    rest = parts[idx + 1:]
    if rest and _VERSION_SEGMENT.match(rest[0]):
        rest = rest[1:]
    if not rest:
        return None
    rest[-1] = rest[-1].rsplit(".", 1)[0]
    return "/".join(rest)


class CloudinaryImageStore:
    """Cloudinary-backed image storage."""

    def __init__(self, settings: Settings) -> None:
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )

    def upload(self, data: bytes, *, folder: str) -> StoredImage:
        try:
            result = cloudinary.uploader.upload(data, folder=folder, resource_type="image")
        except cloudinary.exceptions.Error as exc:
            logger.error("image_upload_failed", error=str(exc))
            raise ImageStoreError(f"Image upload failed: {exc}") from exc
        return StoredImage(url=result["secure_url"], public_id=result["public_id"])

    def destroy(self, public_id: str) -> None:
        try:
            cloudinary.uploader.destroy(public_id, resource_type="image")
        except cloudinary.exceptions.Error as exc:
            raise ImageStoreError(f"Image delete failed: {exc}") from exc


class ProfileImageService:
    """
    Profile picture replacement.

    Validates the upload, pushes it to the image store, removes the
    previous hosted picture and stores the new URL on the user.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        store: ImageStore,
        *,
        max_size: int,
        folder: str = "profile_images",
    ) -> None:
        self._session_factory = session_factory
        self._store = store
        self._max_size = max_size
        self._folder = folder

    def _validate(self, content_type: Optional[str], data: bytes) -> None:
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise errors.ValidationError(Messages.INVALID_IMAGE, field="file")
        if not data:
            raise errors.ValidationError("Uploaded file is empty", field="file")
        if len(data) > self._max_size:
            raise errors.ValidationError(
                f"File exceeds the maximum size of {self._max_size} bytes",
                field="file",
            )

    def _discard(self, old_url: Optional[str]) -> None:
        public_id = cloudinary_public_id(old_url)
        if public_id is None:
            return
        try:
            self._store.destroy(public_id)
        except ImageStoreError as exc:
            logger.warning("old_image_delete_failed", public_id=public_id, error=str(exc))

    def replace(self, principal: Principal, content_type: Optional[str], data: bytes) -> str:
        """
        Upload a new profile picture for ``principal``.

        Returns:
            Hosted URL of the new picture

        Raises:
            ValidationError: Wrong content type, empty or oversized file
            NotFoundError: If the user no longer exists
            ImageStoreError: If the upload is rejected
        """
        self._validate(content_type, data)

        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(UserRepository)
            user = repo.get(principal.user_id)
            if user is None:
                raise errors.NotFoundError("User", principal.user_id, message=Messages.USER_NOT_FOUND)
            old_url = user.image

            stored = self._store.upload(data, folder=self._folder)
            user.image = stored.url

        self._discard(old_url)
        logger.info("profile_image_updated", user_id=principal.user_id)
        return stored.url
