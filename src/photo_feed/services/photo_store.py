"""Paginated photo feed cache with single-flight loading."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from urllib.parse import quote

import httpx

from photo_feed.adapters.photo_api_client import PhotoApiClient
from photo_feed.domain.dates import DateParser, parse_timestamp
from photo_feed.domain.errors import (
    CoordinationError,
    PhotoNotFoundError,
    RequestConstructionError,
    TransportError,
)
from photo_feed.domain.photos import LikeResult, Photo, PhotoResult
from photo_feed.services.notifier import ChangeNotifier

DID_CHANGE_NOTIFICATION = "PhotoStoreDidChange"

_logger = logging.getLogger(__name__)


@dataclass
class PhotoStore:
    """Ordered cache of feed photos backed by the photo API.

    All public methods must be called on the event loop that owns the store.
    That loop is the only writer of the cached photos, the page cursor and
    the in-flight slot. The slot holds at most one task, shared by page
    fetches and like toggles; a like still pending after losing the slot
    keeps blocking page fetches until it completes.
    """

    client: PhotoApiClient
    notifier: ChangeNotifier
    date_parser: DateParser = parse_timestamp
    per_page: int = 10
    _photos: list[Photo] = field(default_factory=list, init=False, repr=False)
    _last_loaded_page: int | None = field(default=None, init=False)
    _current_task: asyncio.Task | None = field(default=None, init=False, repr=False)
    _current_action: str | None = field(default=None, init=False, repr=False)
    _pending_likes: set[asyncio.Task] = field(
        default_factory=set, init=False, repr=False
    )
    _loop: asyncio.AbstractEventLoop | None = field(
        default=None, init=False, repr=False
    )

    @property
    def photos(self) -> tuple[Photo, ...]:
        """Return the cached photos in server order."""
        return tuple(self._photos)

    @property
    def last_loaded_page(self) -> int | None:
        """Return the last applied page number, if any."""
        return self._last_loaded_page

    @property
    def is_loading(self) -> bool:
        """Return whether a page fetch or a like change is in flight."""
        return self._current_task is not None or bool(self._pending_likes)

    def fetch_next_page(self) -> "asyncio.Task[None] | None":
        """Schedule loading of the next page.

        Returns the scheduled task, or None when a request is already in
        flight or the request could not be built.
        """
        loop = self._coordination_loop()
        if self.is_loading:
            return None

        next_page = (self._last_loaded_page or 0) + 1
        try:
            request = self.client.build_request(
                "GET",
                "/photos",
                params={"page": next_page, "per_page": self.per_page},
            )
        except RequestConstructionError:
            _logger.exception("Failed to build photos request: page=%s", next_page)
            return None

        task = loop.create_task(self._load_page(request, next_page))
        self._current_task = task
        self._current_action = "fetch"
        return task

    def toggle_like(self, photo_id: str, like: bool) -> "asyncio.Future[Photo]":
        """Send a like change and flip the cached like state on success.

        ``like`` selects POST or DELETE. The cached photo is always flipped
        relative to its current ``is_liked`` value, whatever ``like`` was.
        Any in-flight page fetch is cancelled first.
        """
        loop = self._coordination_loop()
        if self._current_task is not None and self._current_action == "fetch":
            self._current_task.cancel()
            self._current_task = None
            self._current_action = None

        try:
            request = self._build_like_request(photo_id, like)
        except RequestConstructionError as exc:
            _logger.error(
                "Failed to build like request: photo_id=%s: %s", photo_id, exc
            )
            failed: asyncio.Future[Photo] = loop.create_future()
            failed.set_exception(exc)
            return failed

        task = loop.create_task(self._change_like(request, photo_id))
        self._current_task = task
        self._current_action = "like"
        self._pending_likes.add(task)
        return task

    def reset(self) -> None:
        """Drop all cached photos and the page cursor.

        An in-flight page fetch is cancelled. Pending like changes keep
        running and fail with PhotoNotFoundError against the emptied cache.
        """
        self._coordination_loop()
        if self._current_task is not None:
            if self._current_action == "fetch":
                self._current_task.cancel()
            self._current_task = None
            self._current_action = None
        self._photos.clear()
        self._last_loaded_page = None
        self.notifier.publish()

    async def _load_page(self, request: httpx.Request, page: int) -> None:
        task = asyncio.current_task()
        try:
            try:
                results = await self.client.execute(request, list[PhotoResult])
            except TransportError as exc:
                if self._current_task is task:
                    _logger.warning("Failed to load photos page %s: %s", page, exc)
                return

            if self._current_task is not task:
                _logger.debug("Discarding stale photos page %s", page)
                return

            new_photos = [result.to_photo(self.date_parser) for result in results]
            if self._last_loaded_page is None:
                self._last_loaded_page = 1
            else:
                self._last_loaded_page += 1
            self._photos.extend(new_photos)
            self.notifier.publish()
        finally:
            if self._current_task is task:
                self._current_task = None
                self._current_action = None

    async def _change_like(self, request: httpx.Request, photo_id: str) -> Photo:
        task = asyncio.current_task()
        try:
            try:
                await self.client.execute(request, LikeResult)
            except TransportError as exc:
                _logger.warning(
                    "Failed to change like: photo_id=%s: %s", photo_id, exc
                )
                raise

            index = self._index_of(photo_id)
            if index is None:
                raise PhotoNotFoundError(photo_id)
            current = self._photos[index]
            updated = replace(current, is_liked=not current.is_liked)
            self._photos[index] = updated
            return updated
        finally:
            self._pending_likes.discard(task)
            if self._current_task is task:
                self._current_task = None
                self._current_action = None

    def _build_like_request(self, photo_id: str, like: bool) -> httpx.Request:
        if not photo_id:
            raise RequestConstructionError("Photo id must not be empty")
        return self.client.build_request(
            "POST" if like else "DELETE",
            f"/photos/{quote(photo_id, safe='')}/like",
        )

    def _index_of(self, photo_id: str) -> int | None:
        for index, photo in enumerate(self._photos):
            if photo.id == photo_id:
                return index
        return None

    def _coordination_loop(self) -> asyncio.AbstractEventLoop:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise CoordinationError(
                "PhotoStore requires a running event loop"
            ) from exc
        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise CoordinationError("PhotoStore is bound to a different event loop")
        return loop
