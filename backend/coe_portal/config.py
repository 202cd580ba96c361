# coe_portal/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Centre of Entrepreneurship Portal API"
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:5000",
        ).split(",")
        if o.strip()
    ]

    # Bootstrap admin (this account can never be deleted)
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")

    # Comment threads deeper than this are rejected on create / re-parent
    max_comment_depth: int = int(os.getenv("MAX_COMMENT_DEPTH", "32"))

    # OpenAI chat completions (AI-assisted blog content)
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_api_url: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
    gpt_model: str = os.getenv("GPT_MODEL", "gpt-4o-mini")

    # Media storage: "local" (files under upload_dir, served at /uploads) or "cloudinary"
    media_backend: str = os.getenv("MEDIA_BACKEND", "local").lower()
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    max_upload_mb: int = int(os.getenv("MAX_UPLOAD_MB", "50"))

    # Cloudinary credentials (only needed when media_backend == "cloudinary")
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_folder: str = os.getenv("CLOUDINARY_FOLDER", "entrepreneurship-blog")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

settings = Settings()  # Instantiate configuration
