"""
Local disk media storage

Files land in UPLOAD_DIR and are served by the static mount at /uploads.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from ..config import settings
from .media_base import MediaStorage, StoredMedia, unique_name

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"


class LocalMediaStorage(MediaStorage):
    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.upload_dir)

    @property
    def name(self) -> str:
        return "local"

    async def save(
        self,
        data: bytes,
        filename: Optional[str],
        resource_type: str,
        folder: Optional[str] = None,
    ) -> StoredMedia:
        stored_name = unique_name(resource_type, filename)
        target = self.root / stored_name

        def write():
            self.root.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, write)
        logger.info("Stored %s upload %s (%d bytes)", resource_type, stored_name, len(data))
        return StoredMedia(
            url=f"{URL_PREFIX}/{stored_name}",
            resource_type=resource_type,
            public_id=stored_name,
            size=len(data),
        )
