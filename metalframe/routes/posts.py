"""
Posts routes for the admin panel and the public gallery.
"""
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import TypeAdapter, ValidationError
from typing import Any, List, Optional

from ..config import get_settings
from ..dependencies import get_media, get_post_repository
from ..limiter import limiter
from ..localization import display_title, parse_localized_field
from ..logging_config import api_logger
from ..media import MediaStore
from ..repositories import PostRepository
from ..responses import bad_request, not_found, payload_too_large, server_error
from ..schemas.posts import LocalizedText

router = APIRouter(prefix="/api/posts", tags=["posts"])

settings = get_settings()

_LOCALIZED = TypeAdapter(LocalizedText)


def localized_field(name: str, value: Optional[str]) -> Any:
    """Decode a title or description form field. Only text or a mapping of language to text is accepted."""
    parsed = parse_localized_field(value)
    if parsed is None:
        return None
    try:
        return _LOCALIZED.validate_python(parsed)
    except ValidationError:
        bad_request(f"Invalid {name}: expected text or a language-to-text mapping", details={"field": name})


def read_image(image: Optional[UploadFile]) -> Optional[bytes]:
    """Read an uploaded image, enforcing the size limit. Empty uploads count as no image."""
    if image is None:
        return None
    data = image.file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        payload_too_large(f"File too large (max {settings.max_upload_bytes // (1024 * 1024)}MB)")
    return data or None


@router.get("", response_model=List[dict])
def get_posts(repo: PostRepository = Depends(get_post_repository)):
    """Get all posts, newest first."""
    try:
        posts = repo.list_posts()
    except Exception as e:
        api_logger.error("Load posts error", error=e)
        server_error(str(e))
    return [p.to_response() for p in posts]


@router.post("", response_model=dict)
@limiter.limit(settings.write_rate_limit)
def create_post(
    request: Request,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: PostRepository = Depends(get_post_repository),
    media: MediaStore = Depends(get_media),
):
    """Create a post. An image is required."""
    data = read_image(image)
    if data is None:
        bad_request("Image is required", details={"field": "image"})
    if not title:
        bad_request("Title is required", details={"field": "title"})
    if not description:
        bad_request("Description is required", details={"field": "description"})
    title_value = localized_field("title", title)
    description_value = localized_field("description", description)

    image_url = None
    try:
        image_url = media.upload(data, image.filename or "image", image.content_type)
        post = repo.insert_post(title_value, description_value, image_url)
    except Exception as e:
        api_logger.error("Create post error", error=e)
        media.delete_by_url(image_url)
        server_error(str(e))

    api_logger.info("ADMIN: Post created", post_id=post.id, title=display_title(post.title))
    return post.to_response()


@router.put("/{post_id}", response_model=dict)
@limiter.limit(settings.write_rate_limit)
def update_post(
    request: Request,
    post_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: PostRepository = Depends(get_post_repository),
    media: MediaStore = Depends(get_media),
):
    """Update a post. Omitted fields keep their stored values."""
    existing = repo.get_post(post_id)
    if not existing:
        not_found()

    title_value = localized_field("title", title) or existing.title
    description_value = localized_field("description", description) or existing.description
    data = read_image(image)

    uploaded_url = None
    try:
        image_url = existing.image_url
        if data is not None:
            media.delete_by_url(image_url)
            image_url = uploaded_url = media.upload(data, image.filename or "image", image.content_type)

        post = repo.update_post(post_id, title_value, description_value, image_url)
    except Exception as e:
        api_logger.error("Update post error", error=e, post_id=post_id)
        media.delete_by_url(uploaded_url)
        server_error(str(e))

    if post is None:
        not_found()

    api_logger.info("ADMIN: Post updated", post_id=post.id, title=display_title(post.title))
    return post.to_response()


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    repo: PostRepository = Depends(get_post_repository),
    media: MediaStore = Depends(get_media),
):
    """Delete a post and, best-effort, its image."""
    existing = repo.get_post(post_id)
    if not existing:
        not_found()

    api_logger.info("ADMIN: Post deleted", post_id=post_id, title=display_title(existing.title))

    try:
        removed = repo.delete_post(post_id)
    except Exception as e:
        api_logger.error("Delete post error", error=e, post_id=post_id)
        server_error(str(e))

    if not removed:
        not_found()

    media.delete_by_url(existing.image_url)
    return {"ok": True}
