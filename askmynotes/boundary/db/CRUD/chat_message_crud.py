"""
Chat message CRUD operations.

Append-only writes and chronological reads of a subject's conversation log.

Dependencies: sqlalchemy, askmynotes.boundary.db.models
System role: Conversation log persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.boundary.db.CRUD.base_crud import BaseCRUD
from askmynotes.boundary.db.models.chat_message_model import ChatMessageModel, MessageRole


class ChatMessageCRUD(BaseCRUD[ChatMessageModel]):
    """CRUD operations for ChatMessageModel."""

    def __init__(self) -> None:
        super().__init__(ChatMessageModel)

    async def append(
        self,
        session: AsyncSession,
        subject_id: UUID,
        role: MessageRole,
        content: str,
        citations: list[dict] | None = None,
        evidence: list[dict] | None = None,
        confidence: str | None = None,
        created_at: datetime | None = None,
    ) -> ChatMessageModel:
        """
        Append one turn to a subject's log.

        Args:
            session: Async database session
            subject_id: Owning subject
            role: Turn author
            content: Turn text
            citations: Assistant-only citation list
            evidence: Assistant-only evidence list
            confidence: Assistant-only confidence label
            created_at: Explicit turn time; defaults to now

        Returns:
            The created ChatMessageModel

        Raises:
            ValueError: If a user turn carries grounding fields
        """
        role = MessageRole(role)
        if role is MessageRole.USER and (
            citations is not None or evidence is not None or confidence is not None
        ):
            raise ValueError("User messages cannot carry citations, evidence or confidence")

        fields = {
            "subject_id": subject_id,
            "role": role,
            "content": content,
            "citations": citations,
            "evidence": evidence,
            "confidence": confidence,
        }
        if created_at is not None:
            fields["created_at"] = created_at
        return await self.create(session, **fields)

    async def list_for_subject(
        self,
        session: AsyncSession,
        subject_id: UUID,
    ) -> Sequence[ChatMessageModel]:
        """Full conversation log, oldest first."""
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.subject_id == subject_id)
            .order_by(ChatMessageModel.created_at, ChatMessageModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_recent(
        self,
        session: AsyncSession,
        subject_id: UUID,
        limit: int = 10,
    ) -> list[ChatMessageModel]:
        """
        The last `limit` turns of a subject, returned oldest first.

        Args:
            session: Async database session
            subject_id: Owning subject
            limit: Maximum number of turns

        Returns:
            list of ChatMessageModel in chronological order
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.subject_id == subject_id)
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))


chat_message_crud = ChatMessageCRUD()
