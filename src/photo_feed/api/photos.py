"""Photo feed API endpoints."""

from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from photo_feed.domain.errors import (
    PhotoNotFoundError,
    RequestConstructionError,
    TransportError,
)

if TYPE_CHECKING:
    from photo_feed.containers import AppContainer

router = APIRouter(prefix="/photos", tags=["photos"])


@router.get("")
async def list_photos(request: Request) -> dict[str, object]:
    """Return the cached feed."""
    container: AppContainer = request.app.state.container
    store = container.photo_store
    return {
        "photos": [asdict(photo) for photo in store.photos],
        "last_loaded_page": store.last_loaded_page,
        "version": request.app.state.feed_version.value,
        "loading": store.is_loading,
    }


@router.post("/next-page", status_code=status.HTTP_202_ACCEPTED)
async def fetch_next_page(request: Request, wait: bool = False) -> dict[str, object]:
    """Schedule loading of the next feed page."""
    container: AppContainer = request.app.state.container
    task = container.photo_store.fetch_next_page()
    if wait and task is not None:
        await asyncio.wait({task})
    return {"scheduled": task is not None}


@router.post("/reset")
async def reset_feed(request: Request) -> dict[str, str]:
    """Clear the cached feed."""
    container: AppContainer = request.app.state.container
    container.photo_store.reset()
    return {"status": "ok"}


@router.post("/{photo_id}/like")
async def like_photo(photo_id: str, request: Request) -> dict[str, object]:
    """Like a photo."""
    return await _change_like(request, photo_id, like=True)


@router.delete("/{photo_id}/like")
async def unlike_photo(photo_id: str, request: Request) -> dict[str, object]:
    """Remove a like from a photo."""
    return await _change_like(request, photo_id, like=False)


async def _change_like(
    request: Request, photo_id: str, *, like: bool
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    try:
        photo = await asyncio.shield(
            container.photo_store.toggle_like(photo_id, like)
        )
    except PhotoNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except RequestConstructionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except TransportError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    return {"photo": asdict(photo)}
