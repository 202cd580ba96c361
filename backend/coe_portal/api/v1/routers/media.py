# coe_portal/api/v1/routers/media.py
"""
Collaborator endpoints used while writing a post: media uploads and
AI-assisted content generation. Both need an approved account.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from coe_portal.api.v1.deps import require_approved
from coe_portal.config import settings
from coe_portal.core.errors import ValidationFailed
from coe_portal.models.user import User
from coe_portal.services.content_generator import content_generator
from coe_portal.services.media_base import IMAGE, VIDEO, validate_upload
from coe_portal.services.media_factory import store_uploads

router = APIRouter(tags=["media"])
logger = logging.getLogger(__name__)

MAX_IMAGES = 10
MAX_VIDEOS = 5
READ_CHUNK = 1024 * 1024


async def _read_capped(f: UploadFile) -> bytes:
    """Read an upload, giving up as soon as it passes MAX_UPLOAD_MB."""
    limit = settings.max_upload_bytes
    too_large = ValidationFailed("UPLOAD_TOO_LARGE", f"Files may not exceed {settings.max_upload_mb} MB")
    if f.size is not None and f.size > limit:
        raise too_large
    chunks = []
    total = 0
    while True:
        chunk = await f.read(READ_CHUNK)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise too_large
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/uploads", status_code=status.HTTP_201_CREATED)
async def upload_media(
    images: List[UploadFile] = File(default=[]),
    videos: List[UploadFile] = File(default=[]),
    user: User = Depends(require_approved),
):
    """
    Store up to 10 images and 5 videos and return their URLs in upload order.

    The batch is all or nothing: a wrong mimetype (image/* for images,
    video/* for videos) or an oversized file rejects the whole request.

    Returns:
        dict: {"success": True, "data": {"imageUrls": [...], "videoUrls": [...], "files": [...]}}
    """
    if not images and not videos:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="UPLOAD_NO_FILES")
    if len(images) > MAX_IMAGES or len(videos) > MAX_VIDEOS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="UPLOAD_TOO_MANY_FILES")

    batch = []
    for resource_type, files in ((IMAGE, images), (VIDEO, videos)):
        for f in files:
            batch.append((resource_type, f.filename, f.content_type, await _read_capped(f)))

    stored = await store_uploads(batch)
    logger.info("User %s uploaded %d file(s)", user.username, len(stored))
    return {
        "success": True,
        "data": {
            "imageUrls": [s.url for s in stored if s.resource_type == IMAGE],
            "videoUrls": [s.url for s in stored if s.resource_type == VIDEO],
            "files": [s.to_dict() for s in stored],
        },
    }


@router.post("/generate-content")
async def generate_content(
    headline: str = Form(...),
    image: Optional[UploadFile] = File(default=None),
    user: User = Depends(require_approved),
):
    """
    Draft content for a headline (optionally guided by an image).

    Returns:
        dict: {"success": True, "data": {"content": str, "excerpt": str}}

    Raises:
        HTTPException (400): HEADLINE_REQUIRED
        502 AI_GENERATION_FAILED when the provider call fails
    """
    headline = headline.strip()
    if not headline:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="HEADLINE_REQUIRED")

    image_bytes = None
    image_type = "image/jpeg"
    if image is not None and image.filename:
        image_bytes = await _read_capped(image)
        validate_upload(IMAGE, image.content_type, len(image_bytes))
        image_type = image.content_type

    generated = await content_generator.generate(headline, image_bytes=image_bytes, image_type=image_type)
    return {"success": True, "data": generated.to_dict()}
