"""
Document CRUD operations.

Per-subject listing and the id -> filename lookup used by context assembly.

Dependencies: sqlalchemy, askmynotes.boundary.db.models
System role: Document metadata persistence operations
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.boundary.db.CRUD.base_crud import BaseCRUD
from askmynotes.boundary.db.models.document_model import DocumentModel


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def list_by_subject(
        self,
        session: AsyncSession,
        subject_id: UUID,
    ) -> Sequence[DocumentModel]:
        """List a subject's documents in upload order."""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.subject_id == subject_id)
            .order_by(DocumentModel.created_at, DocumentModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def filename_map(
        self,
        session: AsyncSession,
        document_ids: Iterable[UUID],
    ) -> dict[UUID, str]:
        """
        Resolve filenames for a set of document ids.

        Ids with no matching row are simply absent from the result.

        Args:
            session: Async database session
            document_ids: Document ids to resolve

        Returns:
            dict mapping document id to filename
        """
        ids = list(set(document_ids))
        if not ids:
            return {}
        stmt = select(DocumentModel.id, DocumentModel.filename).where(DocumentModel.id.in_(ids))
        result = await session.execute(stmt)
        return {row.id: row.filename for row in result}

    async def get_subject_id(self, session: AsyncSession, document_id: UUID) -> UUID | None:
        """Owning subject of a document, or None when the document is gone."""
        stmt = select(DocumentModel.subject_id).where(DocumentModel.id == document_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


document_crud = DocumentCRUD()
