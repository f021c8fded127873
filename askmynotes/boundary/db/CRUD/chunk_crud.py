"""
Chunk CRUD operations.

Bulk insertion after extraction and ordered retrieval for context assembly.

Dependencies: sqlalchemy, askmynotes.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.boundary.db.CRUD.base_crud import BaseCRUD
from askmynotes.boundary.db.models.chunk_model import ChunkModel
from askmynotes.boundary.db.models.document_model import DocumentModel
from askmynotes.core.document_processing.models import ChunkDraft


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        super().__init__(ChunkModel)

    async def bulk_create(
        self,
        session: AsyncSession,
        document_id: UUID,
        subject_id: UUID,
        drafts: Iterable[ChunkDraft],
    ) -> list[ChunkModel]:
        """
        Insert all chunks of one document.

        Args:
            session: Async database session
            document_id: Owning document
            subject_id: Owning subject (must equal the document's subject)
            drafts: Chunk content, page estimate and ordinal

        Returns:
            The inserted ChunkModel rows
        """
        rows = [
            ChunkModel(
                document_id=document_id,
                subject_id=subject_id,
                content=draft.content,
                page_number=draft.page_number,
                chunk_index=draft.chunk_index,
            )
            for draft in drafts
        ]
        session.add_all(rows)
        await session.flush()
        return rows

    async def list_for_subject(
        self,
        session: AsyncSession,
        subject_id: UUID,
    ) -> Sequence[ChunkModel]:
        """
        All chunks of a subject in reconstruction order.

        Documents are ordered by upload time (id breaks ties) and chunks by
        `chunk_index` within each document, so the result is stable for an
        unchanged chunk set.

        Args:
            session: Async database session
            subject_id: Subject to load

        Returns:
            Ordered sequence of ChunkModel
        """
        stmt = (
            select(ChunkModel)
            .outerjoin(DocumentModel, DocumentModel.id == ChunkModel.document_id)
            .where(ChunkModel.subject_id == subject_id)
            .order_by(
                DocumentModel.created_at,
                ChunkModel.document_id,
                ChunkModel.chunk_index,
            )
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Number of chunks stored for a document."""
        return await self.count_where(session, ChunkModel.document_id == document_id)


chunk_crud = ChunkCRUD()
