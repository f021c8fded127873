"""
Test suite for SubjectService.

Tests the per-session subject limit, name validation, session scoping and
cascading deletion with best-effort file cleanup.

System role: Verification of subject use case orchestration
"""

import uuid
from unittest.mock import MagicMock

import pytest

from askmynotes.application.services.subject_service import SubjectService, resolve_subject
from askmynotes.boundary.db.CRUD.chat_message_crud import chat_message_crud
from askmynotes.boundary.db.CRUD.chunk_crud import chunk_crud
from askmynotes.boundary.db.CRUD.document_crud import document_crud
from askmynotes.boundary.db.CRUD.subject_crud import subject_crud
from askmynotes.boundary.db.models import ChatMessageModel, ChunkModel, MessageRole
from askmynotes.core.exceptions import (
    StorageError,
    SubjectLimitReachedError,
    SubjectNotFoundError,
    ValidationError,
)
from tests.factories import add_document


@pytest.fixture
def mock_storage() -> MagicMock:
    return MagicMock()


@pytest.fixture
def subject_service(test_async_db, mock_storage) -> SubjectService:
    return SubjectService(db=test_async_db, max_subjects=3, storage=mock_storage)


class TestCreateSubject:
    """Test suite for SubjectService.create_subject()."""

    async def test_should_create_subject_for_session(self, subject_service, device_session) -> None:
        subject = await subject_service.create_subject(device_session, "  Biology  ")

        assert subject.name == "Biology"
        assert subject.session_id == "device-1"
        assert subject.document_count == 0

    async def test_fourth_subject_should_be_rejected(self, subject_service, device_session) -> None:
        # Arrange
        for name in ("Biology", "Chemistry", "Physics"):
            await subject_service.create_subject(device_session, name)

        # Act / Assert
        with pytest.raises(SubjectLimitReachedError) as exc_info:
            await subject_service.create_subject(device_session, "History")
        assert exc_info.value.message == "A session can have at most 3 subjects"

    async def test_limit_should_be_per_session(self, subject_service, device_session, other_session) -> None:
        for name in ("Biology", "Chemistry", "Physics"):
            await subject_service.create_subject(device_session, name)

        subject = await subject_service.create_subject(other_session, "History")

        assert subject.session_id == "device-2"

    async def test_blank_name_should_be_rejected(self, subject_service, device_session) -> None:
        with pytest.raises(ValidationError):
            await subject_service.create_subject(device_session, "   ")


class TestListSubjects:
    """Test suite for SubjectService.list_subjects()."""

    async def test_should_only_list_own_subjects(self, subject_service, device_session, other_session) -> None:
        await subject_service.create_subject(device_session, "Biology")
        await subject_service.create_subject(other_session, "History")

        subjects = await subject_service.list_subjects(device_session)

        assert [s.name for s in subjects] == ["Biology"]


class TestResolveSubject:
    """Test suite for resolve_subject()."""

    async def test_without_session_should_skip_ownership(self, test_async_db, biology_subject) -> None:
        subject = await resolve_subject(test_async_db, biology_subject.id)

        assert subject.name == "Biology"

    async def test_foreign_session_should_not_resolve(self, test_async_db, biology_subject, other_session) -> None:
        with pytest.raises(SubjectNotFoundError):
            await resolve_subject(test_async_db, biology_subject.id, other_session)

    async def test_unknown_id_should_not_resolve(self, test_async_db) -> None:
        with pytest.raises(SubjectNotFoundError) as exc_info:
            await resolve_subject(test_async_db, uuid.uuid4())
        assert exc_info.value.message == "Subject not found"


class TestDeleteSubject:
    """Test suite for SubjectService.delete_subject()."""

    async def test_should_cascade_to_documents_chunks_and_messages(
        self, subject_service, mock_storage, test_async_db, biology_subject, device_session, session_factory
    ) -> None:
        # Arrange
        subject_id = biology_subject.id
        document = await add_document(test_async_db, biology_subject, "bio.txt", ["Mitosis has four phases."])
        await chat_message_crud.append(test_async_db, subject_id, MessageRole.USER, "How many phases?")
        await test_async_db.commit()

        # Act
        await subject_service.delete_subject(device_session, subject_id)

        # Assert
        async with session_factory() as db:
            assert await subject_crud.get_by_id(db, subject_id) is None
            assert await document_crud.list_by_subject(db, subject_id) == []
            assert await chunk_crud.count_where(db, ChunkModel.subject_id == subject_id) == 0
            assert await chat_message_crud.count_where(db, ChatMessageModel.subject_id == subject_id) == 0
        mock_storage.delete.assert_called_once_with(document.storage_path)

    async def test_storage_failure_should_not_fail_delete(
        self, subject_service, mock_storage, test_async_db, biology_subject, device_session, session_factory
    ) -> None:
        subject_id = biology_subject.id
        await add_document(test_async_db, biology_subject, "bio.txt", ["Mitosis has four phases."])
        mock_storage.delete.side_effect = StorageError("Failed to delete from S3: denied")

        await subject_service.delete_subject(device_session, subject_id)

        async with session_factory() as db:
            assert await subject_crud.get_by_id(db, subject_id) is None

    async def test_other_session_should_not_delete(
        self, subject_service, biology_subject, other_session, session_factory
    ) -> None:
        subject_id = biology_subject.id

        with pytest.raises(SubjectNotFoundError):
            await subject_service.delete_subject(other_session, subject_id)

        async with session_factory() as db:
            assert await subject_crud.get_by_id(db, subject_id) is not None

    async def test_deleted_subject_should_free_a_slot(self, subject_service, device_session) -> None:
        subjects = [
            await subject_service.create_subject(device_session, name)
            for name in ("Biology", "Chemistry", "Physics")
        ]

        await subject_service.delete_subject(device_session, subjects[0].id)
        replacement = await subject_service.create_subject(device_session, "History")

        assert replacement.name == "History"
