"""Client-side posts synchronization: API first, local cache as fallback."""

from .client import (
    GalleryItem,
    ImageFile,
    PostForm,
    PostsSync,
    StorageMode,
    SubmitResult,
    SyncContext,
)
from .errors import BackendError, NotFoundError, PostsError, TransportError, ValidationError
from .local_cache import LocalCache

__all__ = [
    "GalleryItem",
    "ImageFile",
    "PostForm",
    "PostsSync",
    "StorageMode",
    "SubmitResult",
    "SyncContext",
    "LocalCache",
    "PostsError",
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "BackendError",
]
