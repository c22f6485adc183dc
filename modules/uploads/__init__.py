"""
Uploads module.

Image storage for post covers and avatars.
"""

from .service import UploadFolder, UploadResult, UploadService, build_upload_path

__all__ = [
    "UploadFolder",
    "UploadResult",
    "UploadService",
    "build_upload_path",
]
