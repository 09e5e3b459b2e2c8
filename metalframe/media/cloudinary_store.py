"""Cloudinary media store. Images are served from the Cloudinary CDN."""

import re
from typing import Optional

import cloudinary
import cloudinary.uploader

from ..logging_config import media_logger
from .base import MediaStore

UPLOAD_TRANSFORMATION = [
    {"width": 1200, "height": 800, "crop": "limit"},
    {"quality": "auto"},
]


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """Extract the Cloudinary public_id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1234567890/posts/photo.jpg``
    gives ``posts/photo``.
    """
    if not url or "cloudinary.com" not in url:
        return None

    parts = url.split("/upload/", 1)
    if len(parts) < 2:
        return None

    segments = [
        s for s in parts[1].split("/")
        if not (s.startswith("v") and s[1:].isdigit())
    ]
    public_id = re.sub(r"\.[^/.]+$", "", "/".join(segments))
    return public_id or None


class CloudinaryMediaStore(MediaStore):
    """Uploads into a Cloudinary folder, resized to fit 1200x800."""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "posts",
    ):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder = folder
        media_logger.info("Cloudinary media store", cloud_name=cloud_name, folder=folder)

    def upload(self, data: bytes, filename: str = "image", content_type: Optional[str] = None) -> str:
        media_logger.info("Uploading to Cloudinary", filename=filename, size=len(data))
        result = cloudinary.uploader.upload(
            data,
            folder=self.folder,
            resource_type="image",
            transformation=UPLOAD_TRANSFORMATION,
        )
        url = result["secure_url"]
        media_logger.info("Uploaded to Cloudinary", url=url)
        return url

    def identifier_from_url(self, url: str) -> Optional[str]:
        return public_id_from_url(url)

    def delete(self, identifier: str):
        cloudinary.uploader.destroy(identifier)
