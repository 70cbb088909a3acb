"""Domain ports (interfaces) for external collaborators.

Future me note:
The document database and the image host are MANAGED services - we never
reimplement them, we only talk to them through these two narrow contracts.
Services get an implementation injected in their constructor:

    store = InMemoryDocumentStore()           # tests / local dev
    store = SqlDocumentStore(database)        # SQLAlchemy-backed
    service = ArtistService(store=store, image_host=image_service)

Why Protocols (not ABCs)?
- The managed-store SDK wrappers don't have to inherit from anything
- Test doubles (AsyncMock(spec=...)) and fakes just need the right methods
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Protocol

# === Type Definitions ===

Document = dict[str, Any]
Unsubscribe = Callable[[], None]
FilterOp = Literal["==", "array-contains"]


class ChangeKind(str, Enum):
    """What happened to a document."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """Push notification from the store.

    Subscribers (the sync adapter) only use it as a "something changed"
    signal and re-fetch the full collection.
    """

    collection: str
    document_id: str
    kind: ChangeKind


ChangeListener = Callable[[ChangeEvent], None]


@dataclass(frozen=True)
class QueryFilter:
    """Single where-clause: `field op value`.

    "==" compares the field value; "array-contains" checks membership in a list field.
    """

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document plus its store-assigned id."""

    id: str
    data: Document


# === Atomic set mutations ===
# Hey future me - these are PATCH VALUES, not operations you call. Put them into
# update_document() patches and the store applies them atomically on its side:
#     await store.update_document("artists", artist_id, {"savedBy": array_union(user_id)})
# Union never adds a value that's already there, so two devices saving at the same time
# still end up with ONE membership entry.


@dataclass(frozen=True)
class ArrayUnion:
    """Add values to a list field unless already present."""

    values: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ArrayRemove:
    """Remove every occurrence of the values from a list field."""

    values: tuple[Any, ...] = field(default_factory=tuple)


def array_union(*values: Any) -> ArrayUnion:
    return ArrayUnion(values=values)


def array_remove(*values: Any) -> ArrayRemove:
    return ArrayRemove(values=values)


# === Store Interface ===


class IDocumentStore(Protocol):
    """Document store port (Firestore-like).

    Implementations raise their own exceptions on transport failures - the
    application services wrap anything that isn't a DomainException into
    RemoteError at their boundary.
    """

    async def create_document(self, collection: str, data: Document) -> str:
        """Insert a document and return its new id."""
        ...

    async def update_document(self, collection: str, document_id: str, patch: Document) -> None:
        """Merge a patch into an existing document.

        Patch values may be ArrayUnion / ArrayRemove. Raises EntityNotFoundError
        when the document doesn't exist.
        """
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document (no-op if it is already gone)."""
        ...

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        """Fetch document data or None."""
        ...

    async def query_documents(
        self, collection: str, filters: Sequence[QueryFilter] | None = None
    ) -> list[DocumentSnapshot]:
        """All documents matching every filter, in insertion order."""
        ...

    def subscribe(
        self,
        collection: str,
        filters: Sequence[QueryFilter] | None,
        on_change: ChangeListener,
    ) -> Unsubscribe:
        """Register a change listener; returns the function that detaches it."""
        ...


# === Image Host Interface ===


@dataclass(frozen=True)
class UploadedImage:
    """Result of an image upload: metadata record id + public display URL."""

    id: str
    url: str


class IImageHost(Protocol):
    """Image host port (opaque upload/delete)."""

    async def upload_image(
        self,
        base64_data: str,
        owner_id: str,
        entity_id: str | None = None,
    ) -> UploadedImage:
        """Upload a base64 / data-URL image."""
        ...

    async def delete_image(self, image_id: str) -> None:
        """Forget an uploaded image."""
        ...

    async def attach_to_entity(self, image_id: str, entity_id: str) -> None:
        """Link an uploaded image to the entity it belongs to."""
        ...


__all__ = [
    "ArrayRemove",
    "ArrayUnion",
    "ChangeEvent",
    "ChangeKind",
    "ChangeListener",
    "Document",
    "DocumentSnapshot",
    "FilterOp",
    "IDocumentStore",
    "IImageHost",
    "QueryFilter",
    "Unsubscribe",
    "UploadedImage",
    "array_remove",
    "array_union",
]
