"""Real-time artist list sync.

Hey future me - this turns the store's "something changed" pings into complete,
sorted artist lists for a callback (the SSE endpoint, mostly). We never try to
patch a list incrementally: every change means a FULL re-fetch. Collections are
small, and a full list can't drift from the store.

Ordering problem: re-fetches run concurrently, so an older fetch can finish AFTER
a newer one. Every fetch gets a generation number and a result is only delivered
if its generation is newer than the last delivered one - stale results are dropped.

Lifecycle:
    subscription = adapter.subscribe(on_artists)   # initial snapshot is fetched right away
    ...
    subscription()                                  # or subscription.unsubscribe()

Unsubscribing is idempotent: detaches from the store exactly once, cancels in-flight
fetches, and nothing is delivered afterwards.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence

from hiddenspins.application.services.remote import remote_call
from hiddenspins.domain.entities import Artist, sort_artists_by_name
from hiddenspins.domain.ports import ChangeEvent, IDocumentStore, QueryFilter, Unsubscribe
from hiddenspins.domain.value_objects.artist_normalization import artist_from_document

logger = logging.getLogger(__name__)

ARTISTS_COLLECTION = "artists"

ArtistsCallback = Callable[[list[Artist]], Awaitable[None] | None]
FetchFn = Callable[[], Awaitable[list[Artist]]]


class ArtistSubscription:
    """Handle for one live artist list. Call it to unsubscribe."""

    def __init__(self, fetch: FetchFn | None, callback: ArtistsCallback | None) -> None:
        self._fetch = fetch
        self._callback = callback
        self._detach: Unsubscribe | None = None
        self._active = fetch is not None and callback is not None
        self._issued = 0
        self._delivered = 0
        self._tasks: set[asyncio.Task[None]] = set()

    @classmethod
    def noop(cls) -> "ArtistSubscription":
        """Inactive subscription returned when setup failed."""
        return cls(fetch=None, callback=None)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def delivered_generation(self) -> int:
        return self._delivered

    def __call__(self) -> None:
        self.unsubscribe()

    def attach(self, detach: Unsubscribe) -> None:
        self._detach = detach

    def on_change(self, event: ChangeEvent) -> None:
        """Store listener: any change means re-fetch everything."""
        logger.debug(
            "Artist change (%s %s), refetching", event.kind.value, event.document_id
        )
        self.refresh()

    def refresh(self) -> None:
        """Schedule a full re-fetch."""
        if not self._active:
            return
        self._issued += 1
        task = asyncio.get_running_loop().create_task(self._fetch_and_deliver(self._issued))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch_and_deliver(self, generation: int) -> None:
        if self._fetch is None or self._callback is None:
            return
        try:
            artists = await self._fetch()
        except Exception:
            logger.exception("Artist sync fetch %d failed", generation)
            return

        if not self._active or generation <= self._delivered:
            logger.debug("Dropping stale artist snapshot %d", generation)
            return
        self._delivered = generation

        try:
            result = self._callback(artists)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Artist sync callback failed")

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False

        detach, self._detach = self._detach, None
        if detach is not None:
            try:
                detach()
            except Exception:
                logger.exception("Failed to detach artist listener")

        current = asyncio.current_task() if self._tasks else None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled fetch has finished (or was cancelled)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class ArtistSyncAdapter:
    """Keeps callbacks supplied with the current sorted artist list."""

    def __init__(self, store: IDocumentStore, collection: str = ARTISTS_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    async def snapshot(self, filters: Sequence[QueryFilter] | None = None) -> list[Artist]:
        """One-shot fetch, sorted by name (case-insensitive)."""
        with remote_call("Failed to load artists"):
            snapshots = await self._store.query_documents(self._collection, filters)
        return sort_artists_by_name(
            artist_from_document(snapshot.data, snapshot.id) for snapshot in snapshots
        )

    def subscribe(
        self,
        callback: ArtistsCallback,
        filters: Sequence[QueryFilter] | None = None,
    ) -> ArtistSubscription:
        """Start a live subscription (must be called from inside the event loop).

        Setup failures are logged and give back an inactive subscription - a broken
        live feed shouldn't take the page down with it.
        """
        query_filters = list(filters) if filters else None

        async def fetch() -> list[Artist]:
            return await self.snapshot(query_filters)

        subscription = ArtistSubscription(fetch=fetch, callback=callback)
        try:
            detach = self._store.subscribe(
                self._collection, query_filters, subscription.on_change
            )
        except Exception:
            logger.exception("Could not subscribe to %s changes", self._collection)
            return ArtistSubscription.noop()

        subscription.attach(detach)
        try:
            subscription.refresh()
        except RuntimeError:
            # No running event loop
            logger.exception("Artist sync needs a running event loop")
            subscription.unsubscribe()
            return ArtistSubscription.noop()
        return subscription
