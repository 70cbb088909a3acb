"""Draft lifecycle - "save for later" artist submissions.

Hey future me - drafts are PRIVATE and LENIENT: no URL validation, no image upload,
half-filled forms are fine. They live in `artistDrafts` until they're either deleted
or promoted (published) to the shared `artists` collection.

Promotion is two-phase and NOT atomic:
    1. publish_fn(draft)  -> the new Artist (through normal artist validation)
    2. delete the draft
If (1) fails nothing changed and the draft stays. If (2) fails the artist IS published
and the draft is an orphan - we raise PartialFailureError carrying the artist, and the
caller treats it as success-with-a-warning. The user can delete the orphan later.
"""

from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from hiddenspins.application.services.remote import remote_call
from hiddenspins.domain.entities import Artist, Draft
from hiddenspins.domain.exceptions import EntityNotFoundError, PartialFailureError
from hiddenspins.domain.ports import IDocumentStore, QueryFilter
from hiddenspins.domain.value_objects.artist_normalization import (
    draft_from_document,
    normalize_draft,
    parse_timestamp,
    timestamp_sort_key,
)
from hiddenspins.infrastructure.observability.logger_template import (
    get_module_logger,
    log_operation,
)

logger = get_module_logger(__name__)

DRAFTS_COLLECTION = "artistDrafts"

PublishFn = Callable[[Draft], Awaitable[Artist]]


class DraftService:
    """Save, resume, list, delete and publish drafts."""

    def __init__(self, store: IDocumentStore, collection: str = DRAFTS_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    async def save_draft(self, data: Mapping[str, Any]) -> Draft:
        """Store a new draft (timestamps are set here, not taken from the input)."""
        draft = normalize_draft(data)
        now = datetime.now(UTC)
        draft.created_at = now
        draft.updated_at = now

        async with log_operation(logger, "draft.save", created_by=draft.created_by):
            with remote_call("Failed to save draft"):
                draft.id = await self._store.create_document(
                    self._collection, draft.to_document()
                )
        return draft

    async def update_draft(self, draft_id: str, data: Mapping[str, Any]) -> Draft:
        """Resume editing: merge new form data into an existing draft.

        Raises:
            EntityNotFoundError: draft doesn't exist (deleted or already published)
        """
        with remote_call("Failed to load draft"):
            current = await self._store.get_document(self._collection, draft_id)
        if current is None:
            raise EntityNotFoundError("Draft", draft_id)

        draft = normalize_draft({**current, **data})
        draft.id = draft_id
        draft.created_at = parse_timestamp(current.get("createdAt"))
        draft.updated_at = datetime.now(UTC)

        async with log_operation(logger, "draft.update", draft_id=draft_id):
            with remote_call("Failed to update draft"):
                await self._store.update_document(
                    self._collection, draft_id, draft.to_document()
                )
        return draft

    async def get_draft(self, draft_id: str) -> Draft | None:
        with remote_call("Failed to load draft"):
            document = await self._store.get_document(self._collection, draft_id)
        return draft_from_document(document, draft_id) if document is not None else None

    async def list_drafts(self, user_id: str) -> list[Draft]:
        """A user's drafts, most recently updated first.

        Drafts without a usable updatedAt sort as if updated at the epoch (last).
        Ties keep store order.
        """
        with remote_call("Failed to load drafts"):
            snapshots = await self._store.query_documents(
                self._collection, [QueryFilter("createdBy", "==", user_id)]
            )

        ordered = sorted(
            snapshots,
            key=lambda snapshot: timestamp_sort_key(snapshot.data.get("updatedAt")),
            reverse=True,
        )
        return [draft_from_document(snapshot.data, snapshot.id) for snapshot in ordered]

    async def delete_draft(self, draft_id: str) -> None:
        async with log_operation(logger, "draft.delete", draft_id=draft_id):
            with remote_call("Failed to delete draft"):
                await self._store.delete_document(self._collection, draft_id)

    async def promote(self, draft: Draft, publish_fn: PublishFn) -> Artist:
        """Publish a draft, then delete it.

        Args:
            draft: the draft to publish
            publish_fn: creates the artist (normally ArtistService.create_artist
                fed with draft.to_submission())

        Returns:
            The published artist

        Raises:
            Whatever publish_fn raises (draft left untouched)
            PartialFailureError: published, but the draft could not be deleted;
                `.result` is the artist and `.orphan_id` the leftover draft id
        """
        async with log_operation(logger, "draft.promote", draft_id=draft.id):
            artist = await publish_fn(draft)

        if draft.id is None:
            # Never stored, nothing to clean up
            return artist

        try:
            await self.delete_draft(draft.id)
        except Exception as e:
            logger.warning(
                "Draft %s published as artist %s but could not be deleted: %s",
                draft.id,
                artist.id,
                e,
            )
            raise PartialFailureError(
                "Artist published, but the draft could not be removed",
                result=artist,
                cause=e,
                orphan_id=draft.id,
            ) from e

        return artist

    async def publish(self, draft_id: str, publish_fn: PublishFn) -> Artist:
        """Load a stored draft and promote it.

        Raises:
            EntityNotFoundError: draft doesn't exist
        """
        draft = await self.get_draft(draft_id)
        if draft is None:
            raise EntityNotFoundError("Draft", draft_id)
        return await self.promote(draft, publish_fn)
