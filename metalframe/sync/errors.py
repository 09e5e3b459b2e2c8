"""Errors raised by the posts sync client. Every one carries a user-facing message."""

from typing import Optional


class PostsError(Exception):
    """Base class for sync client failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PostsError):
    """A required form field is missing. Nothing was written."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class NotFoundError(PostsError):
    """The post targeted by an update or delete does not exist."""


class TransportError(PostsError):
    """The API could not be reached."""


class BackendError(PostsError):
    """The API answered but rejected the operation."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
