"""Abstract base class for post repositories."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..schemas.posts import ImportedPost, LocalizedText, Post


class PostRepository(ABC):
    """Interface that all post backends must implement."""

    @abstractmethod
    def list_posts(self) -> List[Post]:
        """All posts, newest first."""

    @abstractmethod
    def get_post(self, post_id: str) -> Optional[Post]:
        """A single post, or None if the id is unknown."""

    @abstractmethod
    def insert_post(
        self,
        title: LocalizedText,
        description: LocalizedText,
        image_url: str,
        created_at: Optional[datetime] = None,
    ) -> Post:
        """Store a new post and return it with its assigned id."""

    @abstractmethod
    def update_post(
        self,
        post_id: str,
        title: LocalizedText,
        description: LocalizedText,
        image_url: str,
    ) -> Optional[Post]:
        """Replace the fields of an existing post. Returns None if the id is unknown."""

    @abstractmethod
    def delete_post(self, post_id: str) -> bool:
        """Remove a post. Returns False if the id is unknown."""

    def bulk_insert(self, posts: List[ImportedPost]) -> int:
        """Append every post as a new record. No deduplication."""
        for post in posts:
            self.insert_post(post.title, post.description, post.image_url or "", post.created_at)
        return len(posts)

    def close(self):
        """Clean up resources."""
