"""
Post model for gallery content.
"""
from sqlalchemy import Column, Integer, DateTime, Text, JSON
from datetime import datetime, timezone
from ..database import Base


class Post(Base):
    __tablename__ = "posts"
    # Ids of deleted posts are never reissued
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    title = Column(JSON, nullable=False)  # plain string or {"en": ..., "uk": ...}
    description = Column(JSON, nullable=False)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = Column(DateTime, nullable=True)
