"""
Services Module

Domain logic and external collaborators:
- Posts / comment threads / staff directory
- Content generation: OpenAI chat completions (template fallback)
- Media storage: local disk or Cloudinary
"""

# Media storage
from .media_base import (
    MediaStorage,
    StoredMedia,
    validate_upload,
)
from .media_factory import (
    get_media_storage,
    store_uploads,
)

# Content generation
from .content_generator import (
    GeneratedContent,
    content_generator,
)

__all__ = [
    # Media
    "MediaStorage",
    "StoredMedia",
    "validate_upload",
    "get_media_storage",
    "store_uploads",
    # Generation
    "GeneratedContent",
    "content_generator",
]
