"""
Application configuration using environment variables.
"""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "MetalFrame Studio API"
    debug: bool = False
    environment: str = "development"

    # Post repository: "database" or "json"
    posts_backend: str = "database"
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./metalframe.db")
    posts_file: str = "./data/posts.json"

    # Media store: "cloudinary" or "local"
    media_backend: str = "local"
    media_root: str = "./data/uploads"
    media_url_prefix: str = "/uploads"
    max_upload_bytes: int = 5 * 1024 * 1024  # 5MB

    # Cloudinary
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "posts"

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Rate limiting
    write_rate_limit: str = "30/minute"

    # Client (sync core)
    api_base_url: str = "http://localhost:3000"
    local_cache_path: str = "./.metalframe/local_storage.json"
    http_timeout: Optional[float] = None  # None blocks until the server answers

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
if settings.posts_backend not in ("database", "json"):
    raise ValueError(f"POSTS_BACKEND must be 'database' or 'json', got {settings.posts_backend!r}")
if settings.media_backend not in ("cloudinary", "local"):
    raise ValueError(f"MEDIA_BACKEND must be 'cloudinary' or 'local', got {settings.media_backend!r}")
