"""
Media Storage Factory

MEDIA_BACKEND selects where uploads go: "local" (default) or "cloudinary".
"""
import logging
from typing import List, Optional, Tuple

from ..config import settings
from ..core.errors import UpstreamFailed
from .media_base import MediaStorage, StoredMedia, validate_upload
from .media_cloudinary import CloudinaryMediaStorage
from .media_local import LocalMediaStorage

logger = logging.getLogger(__name__)

_storage: Optional[MediaStorage] = None


def get_media_storage() -> MediaStorage:
    """
    Get the configured media storage backend

    Note:
    - cloudinary needs CLOUDINARY_* set in .env
    - a missing or unknown backend is reported as UPLOAD_FAILED (502)
    """
    global _storage
    if _storage is not None:
        return _storage

    backend = settings.media_backend
    if backend == "cloudinary":
        storage = CloudinaryMediaStorage()
        if not storage.is_available():
            logger.error("MEDIA_BACKEND=cloudinary but CLOUDINARY_* credentials are missing")
            raise UpstreamFailed(
                "UPLOAD_FAILED",
                "Cloudinary not configured. Please set CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET in .env",
            )
        _storage = storage
    elif backend == "local":
        _storage = LocalMediaStorage()
    else:
        logger.error("Unknown MEDIA_BACKEND: %s", backend)
        raise UpstreamFailed("UPLOAD_FAILED", f"Unknown MEDIA_BACKEND: {backend}")

    logger.info("Media storage backend: %s", _storage.name)
    return _storage


async def store_uploads(
    files: List[Tuple[str, Optional[str], Optional[str], bytes]],
    folder: Optional[str] = None,
) -> List[StoredMedia]:
    """
    Validate every file first, then store them in order.

    files: (resource_type, filename, content_type, data) tuples. A single
    invalid file rejects the whole batch before anything is written.
    """
    for resource_type, _, content_type, data in files:
        validate_upload(resource_type, content_type, len(data))

    storage = get_media_storage()
    stored = []
    for resource_type, filename, _, data in files:
        stored.append(await storage.save(data, filename, resource_type, folder=folder))
    return stored
