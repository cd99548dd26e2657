"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_feed.adapters.photo_api_client import HttpxPhotoApiClient, PhotoApiClient
from photo_feed.config import Settings
from photo_feed.services.notifier import ChangeNotifier
from photo_feed.services.photo_store import DID_CHANGE_NOTIFICATION, PhotoStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    api_client: PhotoApiClient
    notifier: ChangeNotifier
    photo_store: PhotoStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_client = HttpxPhotoApiClient.create(
        base_url=resolved_settings.unsplash_base_url,
        access_token=resolved_settings.unsplash_access_token,
        timeout=resolved_settings.request_timeout_seconds,
    )
    notifier = ChangeNotifier(DID_CHANGE_NOTIFICATION)
    photo_store = PhotoStore(
        client=api_client,
        notifier=notifier,
        per_page=resolved_settings.photos_per_page,
    )

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        api_client=api_client,
        notifier=notifier,
        photo_store=photo_store,
        close_resources=close_resources,
    )
