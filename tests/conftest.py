"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest
from pydantic import TypeAdapter

from photo_feed.adapters.photo_api_client import PhotoApiClient
from photo_feed.config import Settings
from photo_feed.containers import AppContainer
from photo_feed.domain.errors import RequestConstructionError, TransportError
from photo_feed.services.notifier import ChangeNotifier
from photo_feed.services.photo_store import DID_CHANGE_NOTIFICATION, PhotoStore


def photo_payload(
    photo_id: str, liked: bool = False, created_at: str | None = None
) -> dict[str, object]:
    """Build a photo payload shaped like the API response."""
    return {
        "id": photo_id,
        "width": 4000,
        "height": 3000,
        "created_at": created_at or "2024-05-03T11:00:28-04:00",
        "description": f"Photo {photo_id}",
        "urls": {
            "full": f"https://images.test/{photo_id}/full.jpg",
            "regular": f"https://images.test/{photo_id}/regular.jpg",
            "small": f"https://images.test/{photo_id}/small.jpg",
            "thumb": f"https://images.test/{photo_id}/thumb.jpg",
        },
        "liked_by_user": liked,
    }


@dataclass
class FakePhotoApiClient(PhotoApiClient):
    """Scripted photo API client that records requests."""

    pages: dict[int, list[dict[str, object]]] = field(default_factory=dict)
    failing_pages: set[int] = field(default_factory=set)
    like_error: TransportError | None = None
    invalid_base_url: bool = False
    gate: asyncio.Event | None = None
    path_gates: dict[str, asyncio.Event] = field(default_factory=dict)
    ignore_cancellation: bool = False
    requests: list[httpx.Request] = field(default_factory=list)
    closed: bool = False

    def build_request(
        self, method: str, path: str, params: dict[str, object] | None = None
    ) -> httpx.Request:
        if self.invalid_base_url:
            raise RequestConstructionError("Invalid base URL: 'not a url'")
        return httpx.Request(method, f"https://api.test{path}", params=params)

    async def execute(
        self, request: httpx.Request, response_type: type[object]
    ) -> object:
        self.requests.append(request)
        await self._wait_for_gate()
        path = request.url.path
        if path in self.path_gates:
            await self.path_gates[path].wait()
        if path == "/photos":
            page = int(request.url.params["page"])
            if page in self.failing_pages:
                raise TransportError("Server error", status_code=500)
            body: object = self.pages.get(page, [])
        else:
            if self.like_error is not None:
                raise self.like_error
            photo_id = path.split("/")[2]
            body = {"photo": photo_payload(photo_id, liked=request.method == "POST")}
        return TypeAdapter(response_type).validate_python(body)

    async def close(self) -> None:
        self.closed = True

    async def _wait_for_gate(self) -> None:
        if self.gate is None:
            return
        if not self.ignore_cancellation:
            await self.gate.wait()
            return
        try:
            await self.gate.wait()
        except asyncio.CancelledError:
            await self.gate.wait()


@dataclass(eq=False)
class NotificationRecorder:
    """Counts change notifications."""

    count: int = 0

    def __call__(self) -> None:
        self.count += 1


@pytest.fixture
def settings() -> Settings:
    return Settings(
        unsplash_base_url="https://api.test",
        unsplash_access_token="test-token",
    )


@pytest.fixture
def api_client() -> FakePhotoApiClient:
    return FakePhotoApiClient(
        pages={
            1: [photo_payload("1"), photo_payload("2", liked=True)],
            2: [photo_payload("3"), photo_payload("4"), photo_payload("5")],
        }
    )


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier(DID_CHANGE_NOTIFICATION)


@pytest.fixture
def notifications(notifier: ChangeNotifier) -> NotificationRecorder:
    recorder = NotificationRecorder()
    notifier.subscribe(recorder)
    return recorder


@pytest.fixture
def store(api_client: FakePhotoApiClient, notifier: ChangeNotifier) -> PhotoStore:
    return PhotoStore(client=api_client, notifier=notifier)


@pytest.fixture
def container(
    settings: Settings,
    api_client: FakePhotoApiClient,
    notifier: ChangeNotifier,
    store: PhotoStore,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        api_client=api_client,
        notifier=notifier,
        photo_store=store,
        close_resources=api_client.close,
    )
