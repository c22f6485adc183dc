"""
Upload API endpoint.

Stores post cover images and avatars and returns their public URLs.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from api.dependencies import get_upload_service, require_active_principal
from modules.profiles.models import Principal

from .service import UploadFolder, UploadResult, UploadService

router = APIRouter()


@router.post("/{folder}", response_model=UploadResult, status_code=201)
async def upload_image(
    folder: UploadFolder,
    image: UploadFile = File(...),
    principal: Principal = Depends(require_active_principal),
    service: UploadService = Depends(get_upload_service),
) -> UploadResult:
    """
    Upload an image into blog-covers or avatars.

    Use the returned url as a post's cover_image or a profile's avatar_url.
    """
    data = await image.read()
    return await service.upload_image(
        folder,
        image.filename or "upload",
        data,
        image.content_type,
    )
