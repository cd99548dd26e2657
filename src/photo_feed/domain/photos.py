"""Photo domain models and API payloads."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field

from photo_feed.domain.dates import DateParser, parse_timestamp


@dataclass(frozen=True)
class PhotoSize:
    """Pixel dimensions of a photo."""

    width: int
    height: int


@dataclass(frozen=True)
class Photo:
    """A photo cached in the feed."""

    id: str
    size: PhotoSize
    created_at: datetime | None
    description: str | None
    thumb_image_url: str
    small_image_url: str
    regular_image_url: str
    large_image_url: str
    is_liked: bool


class PhotoUrls(BaseModel):
    """Image URL bundle from the API."""

    full: str = Field(min_length=1)
    regular: str = Field(min_length=1)
    small: str = Field(min_length=1)
    thumb: str = Field(min_length=1)


class PhotoResult(BaseModel):
    """Photo payload as returned by the API."""

    id: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    created_at: str | None = None
    description: str | None = None
    urls: PhotoUrls
    liked_by_user: bool

    def to_photo(self, date_parser: DateParser = parse_timestamp) -> Photo:
        """Map the payload to a domain photo."""
        created_at = None
        if self.created_at:
            try:
                created_at = date_parser(self.created_at)
            except (ValueError, TypeError, OverflowError):
                created_at = None
        return Photo(
            id=self.id,
            size=PhotoSize(width=self.width, height=self.height),
            created_at=created_at,
            description=self.description,
            thumb_image_url=self.urls.thumb,
            small_image_url=self.urls.small,
            regular_image_url=self.urls.regular,
            large_image_url=self.urls.full,
            is_liked=self.liked_by_user,
        )


class LikeResult(BaseModel):
    """Like endpoint confirmation payload."""

    photo: PhotoResult
