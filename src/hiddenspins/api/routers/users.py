"""Per-user views: artists a user added, saved, or left as drafts."""

from fastapi import APIRouter, Depends

from hiddenspins.api.dependencies import get_artist_service, get_draft_service
from hiddenspins.api.schemas import ArtistResponse, DraftResponse
from hiddenspins.application.services import ArtistService, DraftService

router = APIRouter(prefix="/users/{user_id}", tags=["Users"])


@router.get("/artists", response_model=list[ArtistResponse])
async def list_user_artists(
    user_id: str,
    service: ArtistService = Depends(get_artist_service),
) -> list[ArtistResponse]:
    return [ArtistResponse.from_entity(a) for a in await service.list_artists_by_user(user_id)]


@router.get("/saved", response_model=list[ArtistResponse])
async def list_saved_artists(
    user_id: str,
    service: ArtistService = Depends(get_artist_service),
) -> list[ArtistResponse]:
    return [ArtistResponse.from_entity(a) for a in await service.list_saved_artists(user_id)]


@router.get("/drafts", response_model=list[DraftResponse])
async def list_user_drafts(
    user_id: str,
    service: DraftService = Depends(get_draft_service),
) -> list[DraftResponse]:
    """A user's drafts, most recently updated first."""
    return [DraftResponse.from_entity(d) for d in await service.list_drafts(user_id)]
