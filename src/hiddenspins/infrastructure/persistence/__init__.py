"""Infrastructure persistence layer."""

from .database import Database
from .document_store import SqlDocumentStore
from .memory_store import InMemoryDocumentStore
from .models import Base, DocumentModel

__all__ = [
    "Base",
    "Database",
    "DocumentModel",
    "InMemoryDocumentStore",
    "SqlDocumentStore",
]
