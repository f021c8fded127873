"""
Chunk ORM model.

An addressable slice of a document's extracted text: the unit of context
assembly and citation.

Dependencies: sqlalchemy, askmynotes.boundary.db.base
System role: Chunk persistence with document and subject provenance
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askmynotes.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class ChunkModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Chunk ORM model.

    `subject_id` duplicates `document.subject_id` so a subject's chunks can be
    filtered from one table. The store does not check that the two agree;
    DocumentProcessor verifies it before inserting.

    Attributes:
        id: UUID primary key
        document_id: Owning document (ON DELETE CASCADE)
        subject_id: Owning subject (ON DELETE CASCADE)
        content: Chunk text
        page_number: Estimated page, approximate by construction
        chunk_index: Zero-based ordinal within the document
        created_at: Insertion time (UTC)
    """

    __tablename__ = "chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_chunks_document_index"),
    )

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)

    document = relationship("DocumentModel", back_populates="chunks")
    subject = relationship("SubjectModel", back_populates="chunks")
