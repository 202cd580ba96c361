"""
Cloudinary media storage

Uploads go straight from memory to Cloudinary; only the secure URL is kept.
Credentials come from CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY /
CLOUDINARY_API_SECRET.
"""
import asyncio
import logging
from typing import Optional

import cloudinary
import cloudinary.uploader

from ..config import settings
from ..core.errors import UpstreamFailed
from .media_base import MediaStorage, StoredMedia, unique_name

logger = logging.getLogger(__name__)


class CloudinaryMediaStorage(MediaStorage):
    def __init__(self):
        self._configured = False

    @property
    def name(self) -> str:
        return "cloudinary"

    def is_available(self) -> bool:
        return bool(
            settings.cloudinary_cloud_name
            and settings.cloudinary_api_key
            and settings.cloudinary_api_secret
        )

    def _configure(self) -> None:
        if self._configured:
            return
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )
        self._configured = True

    async def save(
        self,
        data: bytes,
        filename: Optional[str],
        resource_type: str,
        folder: Optional[str] = None,
    ) -> StoredMedia:
        self._configure()
        public_id = unique_name(resource_type, filename).rsplit(".", 1)[0]

        def upload():
            return cloudinary.uploader.upload(
                data,
                folder=folder or settings.cloudinary_folder,
                public_id=public_id,
                resource_type=resource_type,
            )

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, upload)
        except Exception as e:
            logger.warning("Cloudinary upload failed: %s", e)
            raise UpstreamFailed("UPLOAD_FAILED", "Media upload failed") from e

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise UpstreamFailed("UPLOAD_FAILED", "Cloudinary returned no URL")

        return StoredMedia(
            url=url,
            resource_type=resource_type,
            public_id=result.get("public_id"),
            size=int(result.get("bytes") or len(data)),
        )
