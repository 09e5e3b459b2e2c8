"""JSON file post repository. The whole post list lives in one file.

The file holds ``{"next_id": N, "posts": [...]}``. ``next_id`` only grows, so ids
of deleted posts are never handed out again. A bare list (older files) is
read as posts with ``next_id`` one past the largest id.

Every mutation re-reads and rewrites the file. Two writers racing on the same
file can lose an update; this backend does not guard against that.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..fileio import atomic_write_text
from ..logging_config import db_logger
from ..schemas.posts import LocalizedText, Post, next_numeric_id
from .base import PostRepository

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(post: Post) -> datetime:
    created = post.created_at
    if created is None:
        return _OLDEST
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


class JSONPostRepository(PostRepository):
    """Flat-file storage, handy for small sites without a database."""

    def __init__(self, path: str = "data/posts.json"):
        self.path = Path(path)
        self._next_id = 1
        db_logger.debug("JSON post repository", path=str(self.path))

    def _load(self) -> List[Post]:
        if not self.path.exists():
            self._next_id = 1
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        stored_next = 1
        if isinstance(raw, dict):
            stored_next = int(raw.get("next_id") or 1)
            raw = raw.get("posts") or []
        posts = [Post.model_validate(item) for item in raw]
        self._next_id = max(stored_next, int(next_numeric_id(p.id for p in posts)))
        return posts

    def _save(self, posts: List[Post]):
        data = {"next_id": self._next_id, "posts": [p.to_response() for p in posts]}
        atomic_write_text(self.path, json.dumps(data, ensure_ascii=False, indent=2))

    def list_posts(self) -> List[Post]:
        return sorted(self._load(), key=_sort_key, reverse=True)

    def get_post(self, post_id: str) -> Optional[Post]:
        for post in self._load():
            if post.id == str(post_id):
                return post
        return None

    def insert_post(
        self,
        title: LocalizedText,
        description: LocalizedText,
        image_url: str,
        created_at: Optional[datetime] = None,
    ) -> Post:
        posts = self._load()
        post = Post(
            id=str(self._next_id),
            title=title,
            description=description,
            image_url=image_url,
            created_at=created_at or datetime.now(timezone.utc),
        )
        posts.insert(0, post)
        self._next_id += 1
        self._save(posts)
        return post

    def update_post(
        self,
        post_id: str,
        title: LocalizedText,
        description: LocalizedText,
        image_url: str,
    ) -> Optional[Post]:
        posts = self._load()
        for index, post in enumerate(posts):
            if post.id == str(post_id):
                updated = post.model_copy(update={
                    "title": title,
                    "description": description,
                    "image_url": image_url,
                    "updated_at": datetime.now(timezone.utc),
                })
                posts[index] = updated
                self._save(posts)
                return updated
        return None

    def delete_post(self, post_id: str) -> bool:
        posts = self._load()
        remaining = [p for p in posts if p.id != str(post_id)]
        if len(remaining) == len(posts):
            return False
        self._save(remaining)
        return True
