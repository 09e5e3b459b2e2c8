from .posts import router as posts_router
from .imports import router as imports_router

__all__ = [
    "posts_router",
    "imports_router",
]
