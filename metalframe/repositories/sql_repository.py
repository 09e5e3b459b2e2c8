"""Relational post repository backed by the SQLAlchemy ``posts`` table."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.post import Post as PostRow
from ..schemas.posts import ImportedPost, LocalizedText, Post
from .base import PostRepository


def row_to_post(row: PostRow) -> Post:
    return Post(
        id=str(row.id),
        title=row.title,
        description=row.description,
        image_url=row.image_url or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_pk(post_id: str) -> Optional[int]:
    try:
        return int(post_id)
    except (TypeError, ValueError):
        return None


class SQLPostRepository(PostRepository):
    """Posts in a relational table. Each mutation is its own transaction."""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, post_id: str) -> Optional[PostRow]:
        pk = _to_pk(post_id)
        if pk is None:
            return None
        return self.db.query(PostRow).filter(PostRow.id == pk).first()

    def list_posts(self) -> List[Post]:
        rows = self.db.query(PostRow).order_by(PostRow.created_at.desc(), PostRow.id.desc()).all()
        return [row_to_post(r) for r in rows]

    def get_post(self, post_id: str) -> Optional[Post]:
        row = self._get_row(post_id)
        return row_to_post(row) if row else None

    def insert_post(
        self,
        title: LocalizedText,
        description: LocalizedText,
        image_url: str,
        created_at: Optional[datetime] = None,
    ) -> Post:
        row = PostRow(
            title=title,
            description=description,
            image_url=image_url,
            created_at=created_at or datetime.now(timezone.utc),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row_to_post(row)

    def update_post(
        self,
        post_id: str,
        title: LocalizedText,
        description: LocalizedText,
        image_url: str,
    ) -> Optional[Post]:
        row = self._get_row(post_id)
        if not row:
            return None

        row.title = title
        row.description = description
        row.image_url = image_url
        row.updated_at = datetime.now(timezone.utc)

        self.db.commit()
        self.db.refresh(row)
        return row_to_post(row)

    def delete_post(self, post_id: str) -> bool:
        row = self._get_row(post_id)
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def bulk_insert(self, posts: List[ImportedPost]) -> int:
        now = datetime.now(timezone.utc)
        self.db.add_all([
            PostRow(
                title=p.title,
                description=p.description,
                image_url=p.image_url or "",
                created_at=p.created_at or now,
            )
            for p in posts
        ])
        self.db.commit()
        return len(posts)

    def close(self):
        self.db.close()
