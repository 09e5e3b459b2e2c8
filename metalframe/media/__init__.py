"""Media stores for post images."""

from .base import MediaStore
from .local_store import LocalMediaStore

__all__ = ["MediaStore", "LocalMediaStore", "get_media_store"]


def get_media_store(backend: str = "local", **kwargs) -> MediaStore:
    """Factory to get the configured media store.

    Args:
        backend: One of 'local', 'cloudinary'.
        **kwargs: Backend-specific config.

    Returns:
        MediaStore instance.
    """
    if backend == "local":
        return LocalMediaStore(
            kwargs.get("media_root", "data/uploads"),
            kwargs.get("url_prefix", "/uploads"),
        )
    elif backend == "cloudinary":
        from .cloudinary_store import CloudinaryMediaStore
        return CloudinaryMediaStore(
            cloud_name=kwargs.get("cloud_name"),
            api_key=kwargs.get("api_key"),
            api_secret=kwargs.get("api_secret"),
            folder=kwargs.get("folder", "posts"),
        )
    else:
        raise ValueError(f"Unknown media backend: {backend}")
