"""
Chat service for grounded Q&A over a subject's notes.

Orchestrates subject resolution, history lookup, context assembly and the
answer engine, then appends the user and assistant turns to the chat log.
Log writes run as two independent detached tasks with their own database
sessions, so the answer is returned without waiting for them and a failed
write never reaches the caller.

Dependencies: askmynotes.core.grounding, askmynotes.boundary.db, askmynotes.core.background
System role: Chat service orchestration layer
"""

import logging
from datetime import datetime, timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askmynotes.application.services.subject_service import resolve_subject
from askmynotes.application.session_context import SessionContext
from askmynotes.boundary.db.base import utcnow
from askmynotes.boundary.db.CRUD.chat_message_crud import chat_message_crud
from askmynotes.boundary.db.models.chat_message_model import ChatMessageModel, MessageRole
from askmynotes.core.background import spawn_detached
from askmynotes.core.grounding.answer_engine import GroundedAnswerEngine
from askmynotes.core.grounding.answer_schema import GroundedAnswer
from askmynotes.core.grounding.context_assembler import ContextAssembler
from askmynotes.core.grounding.conversation import (
    HISTORY_WINDOW,
    ConversationMode,
    ConversationTurn,
)

logger = logging.getLogger(__name__)


async def persist_turn(
    session_factory: async_sessionmaker[AsyncSession],
    subject_id: UUID,
    role: MessageRole,
    content: str,
    created_at: datetime,
    citations: list[dict] | None = None,
    evidence: list[dict] | None = None,
    confidence: str | None = None,
) -> None:
    """
    Append one chat turn in its own session and transaction.

    Meant to run detached: exceptions propagate to the task's done callback,
    which logs them.
    """
    async with session_factory() as db:
        await chat_message_crud.append(
            db,
            subject_id=subject_id,
            role=role,
            content=content,
            citations=citations,
            evidence=evidence,
            confidence=confidence,
            created_at=created_at,
        )
        await db.commit()


class ChatService:
    """
    Chat service for grounded Q&A.

    Coordinates subject validation, history retrieval, context assembly,
    answer generation and chat log persistence.
    """

    def __init__(
        self,
        db: AsyncSession,
        engine: GroundedAnswerEngine,
        assembler: ContextAssembler,
        session_factory: async_sessionmaker[AsyncSession],
        history_window: int = HISTORY_WINDOW,
    ) -> None:
        """
        Args:
            db: AsyncSession for request-scoped reads
            engine: Grounded answer engine
            assembler: Context assembler
            session_factory: Factory for the detached log-write sessions
            history_window: Turns loaded from the log when none are supplied
        """
        self.db = db
        self.engine = engine
        self.assembler = assembler
        self.session_factory = session_factory
        self.history_window = history_window

    async def ask(
        self,
        subject_id: UUID,
        question: str,
        history: Sequence[ConversationTurn] | None = None,
        mode: ConversationMode = ConversationMode.CHAT,
        session: SessionContext | None = None,
    ) -> GroundedAnswer:
        """
        Answer a question from a subject's notes.

        Flow:
        1. Resolve subject (404 when absent)
        2. Use supplied history, or the last turns of the stored log when None
        3. Assemble context; empty context returns the fixed no-notes answer
        4. Generate the grounded answer
        5. Append user and assistant turns detached

        Args:
            subject_id: Subject UUID
            question: User question
            history: Prior turns; None loads them from the chat log
            mode: Chat or voice call
            session: Calling session; enforces ownership when given

        Returns:
            GroundedAnswer

        Raises:
            SubjectNotFoundError: Subject missing or not owned
            UpstreamError: Generation failed
        """
        subject = await resolve_subject(self.db, subject_id, session)
        subject_name = subject.name

        if history is None:
            history = await self.recent_turns(subject_id)

        asked_at = utcnow()
        context = await self.assembler.assemble(self.db, subject_id)
        answer = await self.engine.answer(
            subject_name=subject_name,
            question=question,
            context=context,
            history=history,
            mode=mode,
        )

        if context.is_empty:
            return answer

        self._log_turns(subject_id, question, answer, asked_at)
        return answer

    def _log_turns(
        self,
        subject_id: UUID,
        question: str,
        answer: GroundedAnswer,
        asked_at: datetime,
    ) -> None:
        answered_at = max(utcnow(), asked_at + timedelta(microseconds=1))
        spawn_detached(
            persist_turn(
                self.session_factory,
                subject_id=subject_id,
                role=MessageRole.USER,
                content=question,
                created_at=asked_at,
            ),
            name=f"chat-log-user-{subject_id}",
        )
        spawn_detached(
            persist_turn(
                self.session_factory,
                subject_id=subject_id,
                role=MessageRole.ASSISTANT,
                content=answer.content,
                created_at=answered_at,
                citations=[c.model_dump() for c in answer.citations],
                evidence=[e.model_dump() for e in answer.evidence],
                confidence=answer.confidence.value,
            ),
            name=f"chat-log-assistant-{subject_id}",
        )
        logger.info(f"{__name__}:ask - Chat turns dispatched", extra={"subject_id": str(subject_id)})

    async def recent_turns(self, subject_id: UUID) -> list[ConversationTurn]:
        """Last `history_window` stored turns as ConversationTurn, oldest first."""
        messages = await chat_message_crud.get_recent(self.db, subject_id, self.history_window)
        return [ConversationTurn(role=m.role.value, content=m.content) for m in messages]

    async def get_history(
        self,
        subject_id: UUID,
        session: SessionContext | None = None,
    ) -> Sequence[ChatMessageModel]:
        """
        Full chat log of a subject.

        Raises:
            SubjectNotFoundError: Subject missing or not owned
        """
        await resolve_subject(self.db, subject_id, session)
        return await chat_message_crud.list_for_subject(self.db, subject_id)
