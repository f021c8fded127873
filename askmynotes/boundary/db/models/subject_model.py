"""
Subject ORM model.

A subject is the isolation boundary for notes: documents, chunks and the
chat log all hang off it and are removed with it.

Dependencies: sqlalchemy, askmynotes.boundary.db.base
System role: Subject persistence and cascade root
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askmynotes.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SubjectModel(Base, UUIDMixin, TimestampMixin):
    """
    Subject ORM model owned by one anonymous session.

    The per-session subject limit is enforced by SubjectService, not by the
    table. `document_count` is denormalized and recomputed after each upload.

    Attributes:
        id: UUID primary key (auto-generated)
        name: Display name shown to the user and used in refusal messages
        session_id: Opaque per-device session token that owns the subject
        document_count: Number of documents, recomputed on upload
        created_at: Subject creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        documents: One-to-many with DocumentModel (cascade delete)
        chunks: One-to-many with ChunkModel (cascade delete)
        messages: One-to-many with ChatMessageModel (cascade delete)
    """

    __tablename__ = "subjects"

    name: Mapped[str] = mapped_column(String(255), nullable=False, doc="Subject name")
    session_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Owning anonymous session token",
    )
    document_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Denormalized document count",
    )

    documents = relationship(
        "DocumentModel",
        back_populates="subject",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    chunks = relationship(
        "ChunkModel",
        back_populates="subject",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages = relationship(
        "ChatMessageModel",
        back_populates="subject",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
