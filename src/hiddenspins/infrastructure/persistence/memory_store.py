"""In-memory document store.

Hey future me - this is the fake we run tests against and what `store.backend=memory`
gives you for local dev. It is NOT a toy though: patch semantics, filters and change
notifications come from the same helpers the SQL adapter uses (documents.py).

Every operation yields to the event loop once before touching state, like a real
network round-trip would. That lets tests interleave concurrent operations
(two sessions toggling the same save) the way they would interleave in production.
"""

import asyncio
import logging
import uuid
from collections import defaultdict
from collections.abc import Sequence

from hiddenspins.domain.exceptions import EntityNotFoundError
from hiddenspins.domain.ports import (
    ChangeEvent,
    ChangeKind,
    ChangeListener,
    Document,
    DocumentSnapshot,
    QueryFilter,
    Unsubscribe,
)
from hiddenspins.infrastructure.persistence.documents import (
    ChangeFeed,
    apply_patch,
    matches_filters,
    snapshot_copy,
)

logger = logging.getLogger(__name__)


class InMemoryDocumentStore:
    """Dict-backed IDocumentStore implementation."""

    def __init__(self) -> None:
        # collection -> {document_id: data}; dicts keep insertion order
        self._collections: dict[str, dict[str, Document]] = defaultdict(dict)
        self._feed = ChangeFeed()

    @property
    def listener_count(self) -> int:
        return self._feed.listener_count

    async def create_document(self, collection: str, data: Document) -> str:
        await asyncio.sleep(0)
        document_id = uuid.uuid4().hex
        stored = snapshot_copy(data)
        self._collections[collection][document_id] = stored
        logger.debug("Created %s/%s", collection, document_id)
        self._feed.publish(
            ChangeEvent(collection, document_id, ChangeKind.CREATED), None, stored
        )
        return document_id

    async def update_document(self, collection: str, document_id: str, patch: Document) -> None:
        await asyncio.sleep(0)
        before = self._collections[collection].get(document_id)
        if before is None:
            raise EntityNotFoundError(collection, document_id)
        after = apply_patch(before, patch)
        self._collections[collection][document_id] = after
        self._feed.publish(
            ChangeEvent(collection, document_id, ChangeKind.UPDATED), before, after
        )

    async def delete_document(self, collection: str, document_id: str) -> None:
        await asyncio.sleep(0)
        before = self._collections[collection].pop(document_id, None)
        if before is None:
            return
        self._feed.publish(
            ChangeEvent(collection, document_id, ChangeKind.DELETED), before, None
        )

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        await asyncio.sleep(0)
        data = self._collections[collection].get(document_id)
        return snapshot_copy(data) if data is not None else None

    async def query_documents(
        self, collection: str, filters: Sequence[QueryFilter] | None = None
    ) -> list[DocumentSnapshot]:
        await asyncio.sleep(0)
        return [
            DocumentSnapshot(id=document_id, data=snapshot_copy(data))
            for document_id, data in self._collections[collection].items()
            if matches_filters(data, filters)
        ]

    def subscribe(
        self,
        collection: str,
        filters: Sequence[QueryFilter] | None,
        on_change: ChangeListener,
    ) -> Unsubscribe:
        return self._feed.subscribe(collection, filters, on_change)
