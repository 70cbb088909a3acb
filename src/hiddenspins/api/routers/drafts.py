"""Draft API endpoints - "save for later" and publishing.

Hey future me - publish is the interesting one. It runs the two-phase promotion
(create the artist, then delete the draft). If only the delete fails the artist IS
live, so we still answer 201 and put a warning + the orphan draft id in the body.
"""

from fastapi import APIRouter, Depends, Response, status

from hiddenspins.api.dependencies import get_artist_service, get_draft_service
from hiddenspins.api.schemas import (
    ArtistResponse,
    ArtistSubmission,
    DraftResponse,
    PublishResponse,
)
from hiddenspins.application.services import ArtistService, DraftService
from hiddenspins.domain.entities import Artist, Draft
from hiddenspins.domain.exceptions import EntityNotFoundError, PartialFailureError

router = APIRouter(prefix="/drafts", tags=["Drafts"])


@router.post("", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
async def save_draft(
    submission: ArtistSubmission,
    service: DraftService = Depends(get_draft_service),
) -> DraftResponse:
    draft = await service.save_draft(submission.to_raw())
    return DraftResponse.from_entity(draft)


@router.get("/{draft_id}", response_model=DraftResponse)
async def get_draft(
    draft_id: str,
    service: DraftService = Depends(get_draft_service),
) -> DraftResponse:
    draft = await service.get_draft(draft_id)
    if draft is None:
        raise EntityNotFoundError("Draft", draft_id)
    return DraftResponse.from_entity(draft)


@router.put("/{draft_id}", response_model=DraftResponse)
async def update_draft(
    draft_id: str,
    submission: ArtistSubmission,
    service: DraftService = Depends(get_draft_service),
) -> DraftResponse:
    """Resume editing a draft."""
    draft = await service.update_draft(draft_id, submission.to_raw())
    return DraftResponse.from_entity(draft)


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_draft(
    draft_id: str,
    service: DraftService = Depends(get_draft_service),
) -> Response:
    await service.delete_draft(draft_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{draft_id}/publish",
    response_model=PublishResponse,
    status_code=status.HTTP_201_CREATED,
)
async def publish_draft(
    draft_id: str,
    drafts: DraftService = Depends(get_draft_service),
    artists: ArtistService = Depends(get_artist_service),
) -> PublishResponse:
    """Publish a draft to the shared library (validated like any new artist)."""

    async def publish(draft: Draft) -> Artist:
        return await artists.create_artist(draft.to_submission())

    try:
        artist = await drafts.publish(draft_id, publish)
    except PartialFailureError as e:
        return PublishResponse(
            artist=ArtistResponse.from_entity(e.result),
            warning=e.message,
            orphan_draft_id=e.orphan_id,
        )
    return PublishResponse(artist=ArtistResponse.from_entity(artist))
