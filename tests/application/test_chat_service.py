"""
Test suite for ChatService.

Runs ask() end to end over the SQLite test database with a mocked
generation client: subject resolution, context assembly, stored-history
fallback and the detached chat-log writes.

System role: Verification of chat service orchestration layer
"""

import logging
import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from askmynotes.application.services.chat_service import ChatService
from askmynotes.boundary.db.CRUD.chat_message_crud import chat_message_crud
from askmynotes.boundary.db.models.chat_message_model import MessageRole
from askmynotes.core.background import drain_detached, pending_count
from askmynotes.core.exceptions import SubjectNotFoundError, UpstreamRateLimitedError
from askmynotes.core.grounding.answer_engine import GroundedAnswerEngine
from askmynotes.core.grounding.answer_schema import (
    Confidence,
    EvidenceItem,
    GroundedAnswer,
    SourceCitation,
)
from askmynotes.core.grounding.context_assembler import ContextAssembler
from askmynotes.core.grounding.conversation import ConversationTurn
from askmynotes.core.grounding.generation import StructuredResult
from tests.factories import BASE_TIME


@pytest.fixture
def grounded_answer() -> GroundedAnswer:
    return GroundedAnswer(
        content="Mitosis has four phases.",
        citations=[SourceCitation(filename="bio.txt", page="1")],
        evidence=[EvidenceItem(quote="Mitosis has four phases.", page="1", section="1", lines="L1")],
        confidence=Confidence.HIGH,
    )


@pytest.fixture
def mock_generation(grounded_answer: GroundedAnswer) -> MagicMock:
    generation = MagicMock()
    generation.generate_structured = AsyncMock(return_value=StructuredResult(grounded_answer))
    return generation


@pytest.fixture
def chat_service(test_async_db, session_factory, mock_generation, generation_settings) -> ChatService:
    """ChatService over the test database with a mocked model."""
    return ChatService(
        db=test_async_db,
        engine=GroundedAnswerEngine(mock_generation, generation_settings),
        assembler=ContextAssembler(),
        session_factory=session_factory,
    )


class TestAsk:
    """Test suite for ChatService.ask()."""

    async def test_should_answer_from_notes(
        self, chat_service: ChatService, biology_notes, grounded_answer: GroundedAnswer
    ) -> None:
        # Act
        answer = await chat_service.ask(biology_notes.id, "How many phases does mitosis have?")
        await drain_detached()

        # Assert
        assert answer == grounded_answer
        assert answer.citations[0].filename == "bio.txt"
        assert answer.citations[0].page == "1"

    async def test_should_log_user_then_assistant_turn(
        self, chat_service: ChatService, biology_notes, session_factory
    ) -> None:
        # Act
        await chat_service.ask(biology_notes.id, "How many phases does mitosis have?")
        await drain_detached()

        # Assert
        async with session_factory() as db:
            messages = await chat_message_crud.list_for_subject(db, biology_notes.id)
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        user, assistant = messages
        assert user.content == "How many phases does mitosis have?"
        assert user.citations is None
        assert user.confidence is None
        assert assistant.content == "Mitosis has four phases."
        assert assistant.citations == [{"filename": "bio.txt", "page": "1"}]
        assert assistant.evidence[0]["lines"] == "L1"
        assert assistant.confidence == "High"
        assert user.created_at < assistant.created_at

    async def test_omitted_history_should_use_stored_log(
        self, chat_service: ChatService, biology_notes, mock_generation: MagicMock
    ) -> None:
        """Test the second question sees the first exchange from the log."""
        # Arrange
        await chat_service.ask(biology_notes.id, "How many phases?")
        await drain_detached()

        # Act
        await chat_service.ask(biology_notes.id, "Name the first one")
        await drain_detached()

        # Assert: system + 2 stored turns + question
        (messages, _), _ = mock_generation.generate_structured.call_args
        assert len(messages) == 4
        assert messages[1].content == "How many phases?"
        assert messages[2].content == "Mitosis has four phases."

    async def test_supplied_history_should_replace_stored_log(
        self, chat_service: ChatService, biology_notes, mock_generation: MagicMock
    ) -> None:
        await chat_service.ask(biology_notes.id, "How many phases?")
        await drain_detached()

        await chat_service.ask(biology_notes.id, "Next?", history=[])
        await drain_detached()

        (messages, _), _ = mock_generation.generate_structured.call_args
        assert len(messages) == 2

    async def test_subject_without_notes_should_not_call_model_or_log(
        self, chat_service: ChatService, biology_subject, mock_generation: MagicMock, session_factory
    ) -> None:
        # Act
        answer = await chat_service.ask(biology_subject.id, "Anything?")

        # Assert
        assert answer.content == "I don't have any notes for Biology yet. Please upload some documents first."
        assert pending_count() == 0
        mock_generation.generate_structured.assert_not_awaited()
        async with session_factory() as db:
            assert await chat_message_crud.list_for_subject(db, biology_subject.id) == []

    async def test_unknown_subject_should_raise_not_found(self, chat_service: ChatService) -> None:
        with pytest.raises(SubjectNotFoundError):
            await chat_service.ask(uuid.uuid4(), "Anything?")

    async def test_other_session_should_not_see_subject(
        self, chat_service: ChatService, biology_notes, other_session
    ) -> None:
        with pytest.raises(SubjectNotFoundError):
            await chat_service.ask(biology_notes.id, "Anything?", session=other_session)

    async def test_upstream_failure_should_propagate_without_logging(
        self, chat_service: ChatService, biology_notes, mock_generation: MagicMock, session_factory
    ) -> None:
        mock_generation.generate_structured.side_effect = UpstreamRateLimitedError()

        with pytest.raises(UpstreamRateLimitedError):
            await chat_service.ask(biology_notes.id, "How many phases?")

        assert pending_count() == 0
        async with session_factory() as db:
            assert await chat_message_crud.list_for_subject(db, biology_notes.id) == []

    async def test_failed_log_write_should_not_affect_answer(
        self, test_async_db, mock_generation, generation_settings, biology_notes, grounded_answer, caplog
    ) -> None:
        """Test a broken log session is reported through logging only."""
        # Arrange
        service = ChatService(
            db=test_async_db,
            engine=GroundedAnswerEngine(mock_generation, generation_settings),
            assembler=ContextAssembler(),
            session_factory=MagicMock(side_effect=RuntimeError("database unavailable")),
        )

        # Act
        with caplog.at_level(logging.ERROR, logger="askmynotes.core.background"):
            answer = await service.ask(biology_notes.id, "How many phases?")
            await drain_detached()

        # Assert
        assert answer == grounded_answer
        assert pending_count() == 0
        failures = [r for r in caplog.records if "Detached task failed" in r.getMessage()]
        assert len(failures) == 2


class TestHistory:
    """Test suite for ChatService.get_history() and recent_turns()."""

    async def test_recent_turns_should_be_bounded_and_chronological(
        self, test_async_db, session_factory, mock_generation, generation_settings, biology_notes
    ) -> None:
        # Arrange
        for i in range(6):
            await chat_message_crud.append(
                test_async_db,
                subject_id=biology_notes.id,
                role=MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT,
                content=f"turn {i}",
                created_at=BASE_TIME + timedelta(seconds=i),
            )
        await test_async_db.commit()
        service = ChatService(
            db=test_async_db,
            engine=GroundedAnswerEngine(mock_generation, generation_settings),
            assembler=ContextAssembler(),
            session_factory=session_factory,
            history_window=4,
        )

        # Act
        turns = await service.recent_turns(biology_notes.id)

        # Assert
        assert turns == [
            ConversationTurn(role="user", content="turn 2"),
            ConversationTurn(role="assistant", content="turn 3"),
            ConversationTurn(role="user", content="turn 4"),
            ConversationTurn(role="assistant", content="turn 5"),
        ]

    async def test_get_history_should_return_full_log(
        self, chat_service: ChatService, biology_notes, device_session
    ) -> None:
        await chat_service.ask(biology_notes.id, "How many phases?")
        await drain_detached()

        messages = await chat_service.get_history(biology_notes.id, device_session)

        assert len(messages) == 2

    async def test_get_history_for_other_session_should_raise(
        self, chat_service: ChatService, biology_notes, other_session
    ) -> None:
        with pytest.raises(SubjectNotFoundError):
            await chat_service.get_history(biology_notes.id, other_session)
