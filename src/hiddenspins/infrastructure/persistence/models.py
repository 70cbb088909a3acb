"""SQLAlchemy ORM models for the SQL-backed document store."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time with timezone info."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


# Hey future me - ONE table holds every collection (artists, artistDrafts, images).
# `pk` is a surrogate autoincrement key that gives us the store's insertion order for free
# (query_documents orders by it). document_id is the opaque id handed to callers; it's
# unique per collection. `data` is the whole camelCase document as JSON - ALWAYS assign a
# new dict when changing it, in-place mutation isn't tracked by the plain JSON type!
class DocumentModel(Base):
    """A single stored document."""

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "document_id", name="uq_documents_collection_document_id"),
    )

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    document_id: Mapped[str] = mapped_column(String(64), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<DocumentModel {self.collection}/{self.document_id}>"
