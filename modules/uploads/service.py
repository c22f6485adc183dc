"""
Image upload service.

Files are stored under "<folder>/<epoch-ms>_<filename>" so repeated uploads
of the same name never collide.
"""

import logging
import re
import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from modules.gateway import IDocumentGateway
from shared.config import Settings, get_settings
from shared.exceptions import ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class UploadFolder(str, Enum):
    BLOG_COVERS = "blog-covers"
    AVATARS = "avatars"


class UploadResult(BaseModel):
    url: str
    path: str


def build_upload_path(folder: UploadFolder, filename: str, now_ms: Optional[int] = None) -> str:
    """Storage path for an upload; path separators in the name are flattened."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", filename.rsplit("/", 1)[-1]).strip("_") or "upload"
    return f"{folder.value}/{now_ms}_{safe_name}"


class UploadService:
    """Validates and stores images through the gateway's file storage."""

    def __init__(self, gateway: IDocumentGateway, settings: Optional[Settings] = None):
        self._gateway = gateway
        self._settings = settings or get_settings()

    async def upload_image(
        self,
        folder: UploadFolder,
        filename: str,
        data: bytes,
        content_type: Optional[str],
    ) -> UploadResult:
        """
        Store an image and return its public URL.

        Raises:
            ValidationError: If the file is empty, too large or not an image
            GatewayError: If the storage call fails
        """
        if not data:
            raise ValidationError("Uploaded file is empty", code="EMPTY_UPLOAD")
        if len(data) > self._settings.max_upload_bytes:
            raise ValidationError(
                "Uploaded file is too large",
                code="UPLOAD_TOO_LARGE",
                details={"max_bytes": self._settings.max_upload_bytes, "size": len(data)},
            )
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError(
                "Only image uploads are supported",
                code="UNSUPPORTED_MEDIA_TYPE",
                details={"content_type": content_type},
            )

        path = build_upload_path(folder, filename)
        url = await self._gateway.upload_file(data, path, content_type)
        logger.info(f"Uploaded {len(data)} bytes to {path}")
        return UploadResult(url=url, path=path)
