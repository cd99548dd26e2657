"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from photo_feed.api.photos import router as photos_router
from photo_feed.app_logging import configure_logging
from photo_feed.containers import AppContainer


@dataclass
class FeedVersion:
    """Counts change notifications published by the photo store."""

    value: int = 0

    def bump(self) -> None:
        self.value += 1


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    feed_version = FeedVersion()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.notifier.subscribe(app.state.feed_version.bump)
        yield
        app.state.container.notifier.unsubscribe(app.state.feed_version.bump)
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.feed_version = feed_version

    app.include_router(photos_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
