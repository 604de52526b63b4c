"""
Profile picture upload.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from leave_api.api.deps import get_image_service, require
from leave_api.core.constants import Messages
from leave_api.schemas.common.response import SuccessResponse
from leave_api.schemas.file import ProfileImageResponse
from leave_api.services.common.permissions import Principal
from leave_api.services.file import ProfileImageService

router = APIRouter(tags=["upload"])


@router.post("/upload-image", response_model=SuccessResponse[ProfileImageResponse])
def upload_image(
    image: Annotated[UploadFile, File(description="JPEG or PNG picture")],
    principal: Annotated[Principal, Depends(require("profile.image"))],
    images: Annotated[ProfileImageService, Depends(get_image_service)],
):
    data = image.file.read()
    url = images.replace(principal, image.content_type, data)
    return SuccessResponse.create(Messages.IMAGE_UPLOADED, ProfileImageResponse(image_url=url))
