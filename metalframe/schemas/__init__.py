from .posts import Post, ImportedPost, ImportRequest, ImportResponse, LocalizedText, next_numeric_id, parse_posts

__all__ = [
    "Post", "ImportedPost", "ImportRequest", "ImportResponse", "LocalizedText",
    "next_numeric_id", "parse_posts",
]
