"""
Media Storage Abstract Interface

Provides a unified interface for storing uploaded images and videos
(local disk / Cloudinary). The rest of the app only ever keeps the
returned URL.
"""
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..config import settings
from ..core.errors import ValidationFailed

IMAGE = "image"
VIDEO = "video"


@dataclass
class StoredMedia:
    """Where an upload ended up"""
    url: str
    resource_type: str  # "image" | "video"
    public_id: Optional[str] = None
    size: int = 0

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "resourceType": self.resource_type,
            "publicId": self.public_id,
            "size": self.size,
        }


def validate_upload(resource_type: str, content_type: Optional[str], size: int) -> None:
    """
    Images must be image/*, videos video/*, and nothing larger than
    MAX_UPLOAD_MB.
    """
    if resource_type not in (IMAGE, VIDEO):
        raise ValidationFailed("UPLOAD_INVALID_FIELD", "Invalid upload field")
    if not (content_type or "").startswith(f"{resource_type}/"):
        raise ValidationFailed(
            "UPLOAD_INVALID_TYPE",
            f"Only {resource_type} files are allowed for {resource_type} uploads",
        )
    if size == 0:
        raise ValidationFailed("UPLOAD_EMPTY", "Uploaded file is empty")
    if size > settings.max_upload_bytes:
        raise ValidationFailed("UPLOAD_TOO_LARGE", f"Files may not exceed {settings.max_upload_mb} MB")


def unique_name(resource_type: str, filename: Optional[str]) -> str:
    """`image-<hex>.png` style name, keeping only the original extension."""
    ext = os.path.splitext(filename or "")[1].lower()
    if not ext.isascii() or len(ext) > 10:
        ext = ""
    return f"{resource_type}-{uuid.uuid4().hex}{ext}"


class MediaStorage(ABC):
    """Media Storage Abstract Base Class"""

    @abstractmethod
    async def save(
        self,
        data: bytes,
        filename: Optional[str],
        resource_type: str,
        folder: Optional[str] = None,
    ) -> StoredMedia:
        """
        Store one already-validated file

        Parameters:
        - data: file content
        - filename: client-supplied name (only the extension is kept)
        - resource_type: "image" or "video"
        - folder: optional grouping hint

        Returns:
        - StoredMedia with a durable URL
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., "local")"""
        pass
