"""Dependency injection for API endpoints.

Hey future me - every service is a SINGLETON built once in the lifespan (see
infrastructure/lifecycle.py) and parked on app.state. These getters just hand them
out. Missing on app.state = startup didn't finish, so we answer 503 instead of
crashing with AttributeError. Tests override them with app.dependency_overrides or
simply put their own services on app.state.
"""

from typing import Any, cast

from fastapi import HTTPException, Request

from hiddenspins.application.services import (
    ArtistService,
    ArtistSyncAdapter,
    DraftService,
    SaveToggleService,
)


def _from_state(request: Request, name: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail=f"{name} not initialized")
    return service


def get_artist_service(request: Request) -> ArtistService:
    """Get the artist service from app state."""
    return cast(ArtistService, _from_state(request, "artist_service"))


def get_draft_service(request: Request) -> DraftService:
    """Get the draft service from app state."""
    return cast(DraftService, _from_state(request, "draft_service"))


def get_save_toggle_service(request: Request) -> SaveToggleService:
    """Get the save-toggle service from app state.

    Shared across requests on purpose: the per-(artist, user) pending state
    has to outlive a single request to reject double toggles.
    """
    return cast(SaveToggleService, _from_state(request, "save_toggle_service"))


def get_artist_sync(request: Request) -> ArtistSyncAdapter:
    """Get the real-time sync adapter from app state."""
    return cast(ArtistSyncAdapter, _from_state(request, "artist_sync"))
