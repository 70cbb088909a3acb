"""SQLAlchemy-backed document store.

Hey future me - this stores every collection in the single `documents` table
(see models.py) and gives the services the same IDocumentStore contract as the managed
store. Filtering happens in Python after loading the collection - collections are small
(one user's drafts, the shared artist library), and JSON operators differ per dialect.

Change notifications are IN-PROCESS only: listeners hear about writes made through
this store instance, published after the transaction commits.
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import select

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
from hiddenspins.infrastructure.persistence.database import Database
from hiddenspins.infrastructure.persistence.documents import (
    ChangeFeed,
    apply_patch,
    matches_filters,
    snapshot_copy,
)
from hiddenspins.infrastructure.persistence.models import DocumentModel, utc_now

logger = logging.getLogger(__name__)


class SqlDocumentStore:
    """IDocumentStore implementation on top of Database."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._feed = ChangeFeed()
        # Read-modify-write for patches (ArrayUnion!) must not interleave inside this process.
        # SQLite would reject the second writer with "database is locked" anyway.
        self._write_lock = asyncio.Lock()

    @property
    def listener_count(self) -> int:
        return self._feed.listener_count

    @staticmethod
    def _by_id(collection: str, document_id: str):  # type: ignore[no-untyped-def]
        return select(DocumentModel).where(
            DocumentModel.collection == collection,
            DocumentModel.document_id == document_id,
        )

    async def create_document(self, collection: str, data: Document) -> str:
        document_id = uuid.uuid4().hex
        stored = snapshot_copy(data)
        async with self._write_lock:
            async with self._db.session_scope() as session:
                session.add(
                    DocumentModel(collection=collection, document_id=document_id, data=stored)
                )
        logger.debug("Created %s/%s", collection, document_id)
        self._feed.publish(
            ChangeEvent(collection, document_id, ChangeKind.CREATED), None, stored
        )
        return document_id

    async def update_document(self, collection: str, document_id: str, patch: Document) -> None:
        async with self._write_lock:
            async with self._db.session_scope() as session:
                result = await session.execute(self._by_id(collection, document_id))
                row = result.scalar_one_or_none()
                if row is None:
                    raise EntityNotFoundError(collection, document_id)
                before = snapshot_copy(row.data)
                after = apply_patch(before, patch)
                # New dict object - plain JSON columns don't track in-place mutation
                row.data = after
                row.updated_at = utc_now()
        self._feed.publish(
            ChangeEvent(collection, document_id, ChangeKind.UPDATED), before, after
        )

    async def delete_document(self, collection: str, document_id: str) -> None:
        async with self._write_lock:
            async with self._db.session_scope() as session:
                result = await session.execute(self._by_id(collection, document_id))
                row = result.scalar_one_or_none()
                if row is None:
                    return
                before = snapshot_copy(row.data)
                await session.delete(row)
        self._feed.publish(
            ChangeEvent(collection, document_id, ChangeKind.DELETED), before, None
        )

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        async with self._db.session_scope() as session:
            result = await session.execute(self._by_id(collection, document_id))
            row = result.scalar_one_or_none()
            return snapshot_copy(row.data) if row is not None else None

    async def query_documents(
        self, collection: str, filters: Sequence[QueryFilter] | None = None
    ) -> list[DocumentSnapshot]:
        async with self._db.session_scope() as session:
            result = await session.execute(
                select(DocumentModel)
                .where(DocumentModel.collection == collection)
                .order_by(DocumentModel.pk)
            )
            rows = result.scalars().all()
            return [
                DocumentSnapshot(id=row.document_id, data=snapshot_copy(row.data))
                for row in rows
                if matches_filters(row.data, filters)
            ]

    def subscribe(
        self,
        collection: str,
        filters: Sequence[QueryFilter] | None,
        on_change: ChangeListener,
    ) -> Unsubscribe:
        return self._feed.subscribe(collection, filters, on_change)
