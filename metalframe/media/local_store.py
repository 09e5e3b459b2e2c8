"""Local disk media store. Images are saved under a directory served by the app."""

import re
import uuid
from pathlib import Path
from typing import Optional

from ..logging_config import media_logger
from .base import MediaStore

_SAFE_SUFFIX = re.compile(r"^\.[a-z0-9]{1,8}$")


class LocalMediaStore(MediaStore):
    """Writes uploads to ``root`` and returns root-relative URLs under ``url_prefix``."""

    def __init__(self, root: str = "data/uploads", url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.url_prefix = "/" + url_prefix.strip("/")
        media_logger.info("Local media store", root=str(self.root), url_prefix=self.url_prefix)

    def upload(self, data: bytes, filename: str = "image", content_type: Optional[str] = None) -> str:
        suffix = Path(filename or "").suffix.lower()
        if not _SAFE_SUFFIX.match(suffix):
            suffix = ""
        name = f"{uuid.uuid4().hex}{suffix}"
        (self.root / name).write_bytes(data)
        media_logger.info("Saved upload", name=name, size=len(data))
        return f"{self.url_prefix}/{name}"

    def identifier_from_url(self, url: str) -> Optional[str]:
        prefix = self.url_prefix + "/"
        if not url or not url.startswith(prefix):
            return None
        name = url[len(prefix):]
        if not name or "/" in name or name.startswith("."):
            return None
        return name

    def delete(self, identifier: str):
        (self.root / identifier).unlink(missing_ok=True)
