"""Post repositories: relational table or JSON file."""

from .base import PostRepository
from .sql_repository import SQLPostRepository
from .json_repository import JSONPostRepository

__all__ = ["PostRepository", "SQLPostRepository", "JSONPostRepository", "get_repository"]


def get_repository(backend: str = "database", **kwargs) -> PostRepository:
    """Factory to get the configured post repository.

    Args:
        backend: One of 'database', 'json'.
        **kwargs: Backend-specific config (``db`` session or ``posts_file``).

    Returns:
        PostRepository instance.
    """
    if backend == "database":
        return SQLPostRepository(kwargs["db"])
    elif backend == "json":
        return JSONPostRepository(kwargs.get("posts_file", "data/posts.json"))
    else:
        raise ValueError(f"Unknown posts backend: {backend}")
