"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin, CreatedAtMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - SubjectModel, DocumentModel, ChunkModel, ChatMessageModel: Domain entities

CRUD singletons live in askmynotes.boundary.db.CRUD.

Dependencies: sqlalchemy, askmynotes.configs
System role: Relational store for subjects, documents, chunks and chat logs,
with cascading deletes rooted at the subject.
"""

from askmynotes.boundary.db.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from askmynotes.boundary.db.connection import (
    dispose_async_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from askmynotes.boundary.db.models import (
    ChatMessageModel,
    ChunkModel,
    DocumentModel,
    MessageRole,
    SubjectModel,
)

__all__ = [
    # Base classes
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "dispose_async_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "SubjectModel",
    "DocumentModel",
    "ChunkModel",
    "ChatMessageModel",
    "MessageRole",
]
