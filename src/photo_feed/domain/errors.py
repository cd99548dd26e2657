"""Errors raised by the photo feed."""


class PhotoFeedError(Exception):
    """Base error for the photo feed."""


class RequestConstructionError(PhotoFeedError):
    """Raised when an API request cannot be built from its inputs."""


class TransportError(PhotoFeedError):
    """Raised when a request fails in transit or its body cannot be decoded."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PhotoNotFoundError(PhotoFeedError):
    """Raised when a confirmed like targets a photo that is not cached."""

    def __init__(self, photo_id: str) -> None:
        super().__init__(f"Photo {photo_id!r} is not in the feed")
        self.photo_id = photo_id


class CoordinationError(PhotoFeedError):
    """Raised when the store is used outside its owning event loop."""
