"""
Subject CRUD operations.

Session-scoped subject queries and the document count refresh.

Dependencies: sqlalchemy, askmynotes.boundary.db.models
System role: Subject persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.boundary.db.CRUD.base_crud import BaseCRUD
from askmynotes.boundary.db.models.document_model import DocumentModel
from askmynotes.boundary.db.models.subject_model import SubjectModel


class SubjectCRUD(BaseCRUD[SubjectModel]):
    """CRUD operations for SubjectModel."""

    def __init__(self) -> None:
        super().__init__(SubjectModel)

    async def list_by_session(
        self,
        session: AsyncSession,
        session_id: str,
    ) -> Sequence[SubjectModel]:
        """
        List subjects owned by an anonymous session, oldest first.

        Args:
            session: Async database session
            session_id: Owning session token

        Returns:
            Sequence of SubjectModel
        """
        stmt = (
            select(SubjectModel)
            .where(SubjectModel.session_id == session_id)
            .order_by(SubjectModel.created_at, SubjectModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_session(self, session: AsyncSession, session_id: str) -> int:
        """Number of subjects owned by a session."""
        return await self.count_where(session, SubjectModel.session_id == session_id)

    async def get_owned(
        self,
        session: AsyncSession,
        subject_id: UUID,
        session_id: str,
    ) -> SubjectModel | None:
        """Fetch a subject only if it belongs to the given session."""
        stmt = select(SubjectModel).where(
            SubjectModel.id == subject_id,
            SubjectModel.session_id == session_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def refresh_document_count(self, session: AsyncSession, subject_id: UUID) -> int:
        """
        Recompute `document_count` from the documents table.

        Args:
            session: Async database session
            subject_id: Subject to refresh

        Returns:
            The stored count
        """
        count_stmt = (
            select(func.count())
            .select_from(DocumentModel)
            .where(DocumentModel.subject_id == subject_id)
        )
        count = int((await session.execute(count_stmt)).scalar_one())
        await self.update_by_id(session, subject_id, document_count=count)
        return count


subject_crud = SubjectCRUD()
