"""Save-toggle state machine - "save this artist to my library".

Hey future me - the UI flips the heart icon BEFORE the store answers (optimistic update).
This service tracks the in-flight part of that per (artist, user) pair:

    UNSAVED --toggle--> SAVING(saved=True)  --ok--> SAVED
                                            --err-> UNSAVED (reverted)
    SAVED   --toggle--> SAVING(saved=False) --ok--> UNSAVED
                                            --err-> SAVED (reverted)

There is ONE instance per app (see lifecycle.py), so two sessions of the same user share
it. A toggle that arrives while another one for the same pair is pending never fails:
- same target (both devices hit "save"): it joins the pending write and returns its result
- opposite target: it waits for the pending write to settle, then runs its own

Convergence itself comes from the store: array_union never adds a duplicate and
array_remove removes every occurrence. Settled pairs are forgotten right away, the
stored `savedBy` list is the only durable state.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from hiddenspins.application.services.remote import remote_call
from hiddenspins.domain.entities import Artist, SaveStatus
from hiddenspins.domain.exceptions import (
    EntityNotFoundError,
    ValidationError,
    ValidationErrorKind,
)
from hiddenspins.domain.ports import IDocumentStore, array_remove, array_union
from hiddenspins.infrastructure.observability.logger_template import log_operation

logger = logging.getLogger(__name__)

ARTISTS_COLLECTION = "artists"


@dataclass
class _PendingToggle:
    status: SaveStatus
    done: asyncio.Future[bool] = field(
        default_factory=lambda: asyncio.get_running_loop().create_future()
    )


class SaveToggleService:
    """Optimistic save/unsave of artists for users."""

    def __init__(self, store: IDocumentStore, collection: str = ARTISTS_COLLECTION) -> None:
        self._store = store
        self._collection = collection
        self._pending: dict[tuple[str, str], _PendingToggle] = {}

    def status(self, artist_id: str, user_id: str) -> SaveStatus | None:
        """Status of an in-flight toggle for a pair, None when nothing is pending."""
        pending = self._pending.get((artist_id, user_id))
        return pending.status if pending is not None else None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @staticmethod
    def is_saved(artist: Artist, user_id: str) -> bool:
        return artist.is_saved_by(user_id)

    async def toggle_save(self, artist_id: str, user_id: str, currently_saved: bool) -> bool:
        """Flip a user's saved state for an artist.

        Args:
            artist_id: artist to save/unsave
            user_id: acting user
            currently_saved: what the caller currently shows

        Returns:
            The new saved state (not currently_saved)

        Raises:
            ValidationError: blank artist or user id (MISSING_IDENTIFIER)
            EntityNotFoundError: artist was deleted (state reverted)
            RemoteError: store failure (state reverted)
        """
        if not (artist_id or "").strip() or not (user_id or "").strip():
            raise ValidationError(ValidationErrorKind.MISSING_IDENTIFIER)

        key = (artist_id, user_id)
        target = not currently_saved

        pending = self._pending.get(key)
        while pending is not None:
            await asyncio.wait([pending.done])
            if pending.status.saved == target and not pending.done.cancelled():
                # Another session asked for the same result - share its outcome
                return pending.done.result()
            pending = self._pending.get(key)

        toggle = _PendingToggle(SaveStatus.pending(target, confirmed=currently_saved))
        self._pending[key] = toggle
        try:
            await self._apply(artist_id, user_id, target)
        except asyncio.CancelledError:
            toggle.done.cancel()
            raise
        except Exception as e:
            toggle.done.set_exception(e)
            # Joined callers re-raise it; mark it retrieved so asyncio doesn't log it
            toggle.done.exception()
            raise
        else:
            toggle.done.set_result(target)
        finally:
            del self._pending[key]

        return target

    async def _apply(self, artist_id: str, user_id: str, target: bool) -> None:
        async with log_operation(
            logger, "save.toggle", artist_id=artist_id, user_id=user_id, saved=target
        ):
            with remote_call("Failed to load artist"):
                document = await self._store.get_document(self._collection, artist_id)
            if document is None:
                raise EntityNotFoundError("Artist", artist_id)

            mutation = array_union(user_id) if target else array_remove(user_id)
            with remote_call("Failed to update saved artists"):
                await self._store.update_document(
                    self._collection, artist_id, {"savedBy": mutation}
                )
