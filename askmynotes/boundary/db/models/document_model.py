"""
Document ORM model.

One uploaded file inside a subject. Rows are immutable after creation and
only disappear through the subject cascade.

Dependencies: sqlalchemy, askmynotes.boundary.db.base
System role: Document metadata persistence
"""

from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askmynotes.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class DocumentModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Document ORM model.

    Attributes:
        id: UUID primary key
        subject_id: Owning subject (ON DELETE CASCADE)
        filename: Original upload filename, rendered in context source labels
        storage_path: Object key of the raw file in the document bucket
        file_size: Size of the raw upload in bytes
        created_at: Upload completion time (UTC)
    """

    __tablename__ = "documents"

    subject_id: Mapped[UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename: Mapped[str] = mapped_column(String(512), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    subject = relationship("SubjectModel", back_populates="documents")
    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
