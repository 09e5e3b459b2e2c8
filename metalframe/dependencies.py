"""
FastAPI dependencies that hand the configured backends to the routes.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from .media import MediaStore, get_media_store
from .repositories import PostRepository, get_repository


def get_post_repository(db: Session = Depends(get_db)) -> PostRepository:
    """Repository selected by POSTS_BACKEND."""
    settings = get_settings()
    return get_repository(settings.posts_backend, db=db, posts_file=settings.posts_file)


@lru_cache()
def get_media() -> MediaStore:
    """Media store selected by MEDIA_BACKEND, built once per process."""
    settings = get_settings()
    return get_media_store(
        settings.media_backend,
        media_root=settings.media_root,
        url_prefix=settings.media_url_prefix,
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        folder=settings.cloudinary_folder,
    )
