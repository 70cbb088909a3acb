"""Artist library API endpoints.

Hey future me - this is the shared library: anyone can list, add, edit and delete
artists and save them to their own library. Route ORDER matters: `/events` must be
registered before `/{artist_id}`, otherwise "events" is taken for an artist id.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from sse_starlette.sse import EventSourceResponse

from hiddenspins.api.dependencies import (
    get_artist_service,
    get_artist_sync,
    get_save_toggle_service,
)
from hiddenspins.api.schemas import (
    ArtistResponse,
    ArtistSubmission,
    SaveToggleRequest,
    SaveToggleResponse,
)
from hiddenspins.application.services import (
    ArtistService,
    ArtistSyncAdapter,
    SaveToggleService,
)
from hiddenspins.domain.entities import Artist
from hiddenspins.domain.exceptions import EntityNotFoundError

router = APIRouter(prefix="/artists", tags=["Artists"])

# Seconds between keep-alive checks while no snapshot arrives
EVENTS_POLL_INTERVAL = 15.0


def _to_payload(artists: list[Artist]) -> str:
    return json.dumps(
        [ArtistResponse.from_entity(a).model_dump(mode="json", by_alias=True) for a in artists]
    )


@router.get("", response_model=list[ArtistResponse])
async def list_artists(
    service: ArtistService = Depends(get_artist_service),
) -> list[ArtistResponse]:
    """All artists, sorted by name."""
    return [ArtistResponse.from_entity(a) for a in await service.list_artists()]


@router.post("", response_model=ArtistResponse, status_code=status.HTTP_201_CREATED)
async def create_artist(
    submission: ArtistSubmission,
    service: ArtistService = Depends(get_artist_service),
) -> ArtistResponse:
    """Add an artist to the library."""
    artist = await service.create_artist(submission.to_raw())
    return ArtistResponse.from_entity(artist)


# Yo, Server-Sent Events: the browser opens ONE long-lived GET and receives the complete,
# sorted artist list every time anything in the library changes. The sync adapter does the
# heavy lifting; we just bridge its callback into the generator with a queue.
@router.get("/events")
async def artist_events(
    request: Request,
    sync: ArtistSyncAdapter = Depends(get_artist_sync),
) -> EventSourceResponse:
    """Stream sorted artist snapshots (SSE)."""

    async def event_generator() -> AsyncIterator[dict[str, Any]]:
        queue: asyncio.Queue[list[Artist]] = asyncio.Queue()
        subscription = sync.subscribe(queue.put_nowait)
        try:
            if not subscription.active:
                yield {"event": "error", "data": json.dumps({"detail": "Live updates unavailable"})}
                return

            while not await request.is_disconnected():
                try:
                    artists = await asyncio.wait_for(queue.get(), timeout=EVENTS_POLL_INTERVAL)
                except TimeoutError:
                    continue
                # Only the newest snapshot matters if several piled up
                while not queue.empty():
                    artists = queue.get_nowait()
                yield {"event": "artists", "data": _to_payload(artists)}
        finally:
            subscription()

    return EventSourceResponse(event_generator())


@router.get("/{artist_id}", response_model=ArtistResponse)
async def get_artist(
    artist_id: str,
    service: ArtistService = Depends(get_artist_service),
) -> ArtistResponse:
    artist = await service.get_artist(artist_id)
    if artist is None:
        raise EntityNotFoundError("Artist", artist_id)
    return ArtistResponse.from_entity(artist)


@router.put("/{artist_id}", response_model=ArtistResponse)
async def update_artist(
    artist_id: str,
    submission: ArtistSubmission,
    service: ArtistService = Depends(get_artist_service),
) -> ArtistResponse:
    """Edit an artist. Fields left out of the body keep their stored values."""
    artist = await service.update_artist(artist_id, submission.to_raw())
    return ArtistResponse.from_entity(artist)


@router.delete("/{artist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artist(
    artist_id: str,
    service: ArtistService = Depends(get_artist_service),
) -> Response:
    await service.delete_artist(artist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{artist_id}/save", response_model=SaveToggleResponse)
async def toggle_save(
    artist_id: str,
    body: SaveToggleRequest,
    service: SaveToggleService = Depends(get_save_toggle_service),
) -> SaveToggleResponse:
    """Save or unsave an artist for a user; returns the new state."""
    saved = await service.toggle_save(artist_id, body.user_id, body.currently_saved)
    return SaveToggleResponse(saved=saved)
