"""Posts sync client: one view of the posts whether or not the API is up.

Every read probes the API. If it answers, the session works in API mode and
writes go to the server; otherwise the session falls back to the local cache
and writes are applied there. The two stores are never merged automatically;
``import_posts`` is the manual bridge from the local cache to the server.
"""

import base64
import json
import mimetypes
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import quote

import requests
from pydantic import ValidationError as SchemaError

from ..localization import DEFAULT_LANGUAGE, resolve_localized, translate
from ..logging_config import sync_logger
from ..schemas.posts import Post, next_numeric_id, parse_posts
from .errors import BackendError, NotFoundError, TransportError, ValidationError
from .local_cache import LocalCache


class StorageMode(str, Enum):
    API = "api"
    LOCAL = "local"


@dataclass
class SyncContext:
    """Per-session state. Each session owns one; nothing is shared between them."""
    mode: StorageMode = StorageMode.API


@dataclass
class ImageFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str) -> "ImageFile":
        p = Path(path)
        content_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        return cls(filename=p.name, content=p.read_bytes(), content_type=content_type)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


@dataclass
class PostForm:
    """The admin create/edit form."""
    title_en: str = ""
    title_uk: str = ""
    description_en: str = ""
    description_uk: str = ""
    image: Optional[ImageFile] = None

    @property
    def title(self) -> Dict[str, str]:
        return {"en": (self.title_en or "").strip(), "uk": (self.title_uk or "").strip()}

    @property
    def description(self) -> Dict[str, str]:
        return {"en": (self.description_en or "").strip(), "uk": (self.description_uk or "").strip()}

    @property
    def has_image(self) -> bool:
        return self.image is not None and bool(self.image.content)

    @classmethod
    def from_post(cls, post: Post) -> "PostForm":
        """Prefill the form for editing. Plain-string fields fill both languages."""
        def pick(value: Any, lang: str) -> str:
            if isinstance(value, dict):
                return value.get(lang) or ""
            return value or ""

        return cls(
            title_en=pick(post.title, "en"),
            title_uk=pick(post.title, "uk"),
            description_en=pick(post.description, "en"),
            description_uk=pick(post.description, "uk"),
        )


@dataclass
class SubmitResult:
    post: Post
    message: str
    posts: List[Post] = field(default_factory=list)


@dataclass
class GalleryItem:
    id: str
    image_url: str
    title: str
    description: str


def _is_success(response) -> bool:
    return 200 <= response.status_code < 300


def _json_or_empty(response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


class PostsSync:
    """Data-access layer for the admin panel and the public gallery."""

    def __init__(
        self,
        base_url: str,
        cache: LocalCache,
        http=None,
        timeout: Optional[float] = None,
        lang: str = DEFAULT_LANGUAGE,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.http = http or requests.Session()
        self.timeout = timeout
        self.lang = lang
        self.log = sync_logger.bind(base_url=self.base_url)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _post_url(self, post_id: str) -> str:
        return self._url(f"/api/posts/{quote(str(post_id), safe='')}")

    def _t(self, key: str) -> str:
        return translate(key, self.lang)

    def _raise_for_response(self, response, fallback_key: str):
        body = _json_or_empty(response)
        message = (body.get("error") if isinstance(body, dict) else None) or self._t(fallback_key)
        if response.status_code == 404:
            raise NotFoundError(message)
        raise BackendError(message, response.status_code)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_posts(self, ctx: SyncContext) -> List[Post]:
        """Posts from the API, or from the local cache if the API is unavailable. Never raises."""
        try:
            response = self.http.get(self._url("/api/posts"), timeout=self.timeout)
            if not _is_success(response):
                raise TransportError(f"Failed to load posts ({response.status_code})")
            posts, skipped = parse_posts(response.json())
        except Exception as e:
            if ctx.mode is StorageMode.API:
                self.log.warning("API unavailable, switching to local cache", error_message=str(e))
            ctx.mode = StorageMode.LOCAL
            return self.cache.load()

        if skipped:
            self.log.warning("Skipped invalid posts from the API", skipped=skipped)
        if ctx.mode is StorageMode.LOCAL:
            self.log.info("API reachable again, switching to API mode")
        ctx.mode = StorageMode.API
        return posts

    def gallery(self, ctx: SyncContext, lang: Optional[str] = None) -> Iterator[GalleryItem]:
        """Posts with title and description resolved for ``lang``, for the public site."""
        lang = lang or self.lang
        for post in self.fetch_posts(ctx):
            yield GalleryItem(
                id=post.id,
                image_url=post.image_url,
                title=resolve_localized(post.title, lang),
                description=resolve_localized(post.description, lang),
            )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def validate(self, form: PostForm, is_edit: bool):
        if not is_edit and not form.has_image:
            raise ValidationError("image", self._t("admin.table.needImage"))
        title = form.title
        if not title["en"] or not title["uk"]:
            raise ValidationError("title", self._t("admin.table.needTitle"))
        description = form.description
        if not description["en"] or not description["uk"]:
            raise ValidationError("description", self._t("admin.table.needDesc"))

    def submit_post(self, ctx: SyncContext, form: PostForm, existing_id: Optional[str] = None) -> SubmitResult:
        """Create (no ``existing_id``) or update a post in the session's current mode.

        Resubmitting a successful create makes a second post.
        """
        is_edit = bool(existing_id)
        self.validate(form, is_edit)

        if ctx.mode is StorageMode.API:
            post, key = self._submit_remote(form, existing_id)
        else:
            post, key = self._submit_local(form, existing_id)

        return SubmitResult(post=post, message=self._t(key), posts=self.fetch_posts(ctx))

    def _submit_remote(self, form: PostForm, existing_id: Optional[str]) -> Tuple[Post, str]:
        data = {
            "title": json.dumps(form.title, ensure_ascii=False),
            "description": json.dumps(form.description, ensure_ascii=False),
        }
        files = None
        if form.has_image:
            image = form.image
            files = {"image": (image.filename or "image", image.content, image.content_type)}

        try:
            if existing_id:
                response = self.http.put(self._post_url(existing_id), data=data, files=files, timeout=self.timeout)
            else:
                response = self.http.post(self._url("/api/posts"), data=data, files=files, timeout=self.timeout)
        except requests.RequestException as e:
            self.log.error("Submit failed", error=e, post_id=existing_id)
            raise TransportError(self._t("admin.table.submitFail"))

        if not _is_success(response):
            self._raise_for_response(response, "admin.table.requestFail")

        try:
            post = Post.model_validate(response.json())
        except (ValueError, SchemaError):
            raise BackendError(self._t("admin.table.requestFail"), response.status_code)

        self.log.info("Post saved", post_id=post.id, mode=StorageMode.API.value)
        return post, "admin.table.updated" if existing_id else "admin.table.created"

    def _submit_local(self, form: PostForm, existing_id: Optional[str]) -> Tuple[Post, str]:
        posts = self.cache.load()
        now = datetime.now(timezone.utc)

        if existing_id:
            index = next((i for i, p in enumerate(posts) if p.id == str(existing_id)), None)
            if index is None:
                raise NotFoundError(self._t("admin.table.notFoundLocal"))
            current = posts[index]
            image_url = form.image.to_data_url() if form.has_image else current.image_url
            post = current.model_copy(update={
                "title": form.title,
                "description": form.description,
                "image_url": image_url,
                "updated_at": now,
            })
            posts[index] = post
            key = "admin.table.localUpdated"
        else:
            post = Post(
                id=next_numeric_id(p.id for p in posts),
                title=form.title,
                description=form.description,
                image_url=form.image.to_data_url(),
                created_at=now,
            )
            posts.insert(0, post)
            key = "admin.table.localCreated"

        self.cache.save(posts)
        self.log.info("Post saved", post_id=post.id, mode=StorageMode.LOCAL.value)
        return post, key

    def delete_post(self, ctx: SyncContext, post_id: str) -> List[Post]:
        """Delete a post and return the reloaded list.

        In local mode an unknown id is ignored. Through the API it raises NotFoundError.
        """
        if ctx.mode is StorageMode.API:
            try:
                response = self.http.delete(self._post_url(post_id), timeout=self.timeout)
            except requests.RequestException as e:
                self.log.error("Delete failed", error=e, post_id=post_id)
                raise TransportError(self._t("admin.table.deleteFail"))
            if not _is_success(response):
                self._raise_for_response(response, "admin.table.deleteFail")
        else:
            posts = self.cache.load()
            remaining = [p for p in posts if p.id != str(post_id)]
            if len(remaining) != len(posts):
                self.cache.save(remaining)

        self.log.info("Post deleted", post_id=post_id, mode=ctx.mode.value)
        return self.fetch_posts(ctx)

    def import_posts(self, posts: Optional[List[Post]] = None) -> int:
        """Push posts (default: the whole local cache) to the server as new records.

        Append-only: running it twice imports everything twice.
        """
        if posts is None:
            posts = self.cache.load()
        payload = {"posts": [p.to_response() for p in posts]}

        try:
            response = self.http.post(self._url("/api/import"), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            self.log.error("Import failed", error=e)
            raise TransportError(self._t("admin.table.submitFail"))

        if not _is_success(response):
            self._raise_for_response(response, "admin.table.requestFail")

        body = _json_or_empty(response)
        imported = body.get("imported", 0) if isinstance(body, dict) else 0
        self.log.info("Posts imported", imported=imported)
        return imported
