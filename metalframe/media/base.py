"""Abstract base class for media stores."""

from abc import ABC, abstractmethod
from typing import Optional

from ..logging_config import media_logger


class MediaStore(ABC):
    """Interface that all image stores must implement."""

    @abstractmethod
    def upload(self, data: bytes, filename: str = "image", content_type: Optional[str] = None) -> str:
        """Store an image and return its durable URL."""

    @abstractmethod
    def identifier_from_url(self, url: str) -> Optional[str]:
        """Derive the store's identifier from a URL it issued, or None if it is not ours."""

    @abstractmethod
    def delete(self, identifier: str):
        """Remove a stored image by identifier."""

    def delete_by_url(self, url: Optional[str]):
        """Best-effort removal. Failures are logged, never raised."""
        if not url:
            return
        identifier = self.identifier_from_url(url)
        if not identifier:
            return
        try:
            media_logger.info("Deleting image", identifier=identifier)
            self.delete(identifier)
        except Exception as e:
            media_logger.error("Image delete failed", error=e, identifier=identifier)
