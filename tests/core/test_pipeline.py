"""
Test suite for DocumentProcessor.

Runs the download -> extract -> chunk -> insert pipeline against the SQLite
test database with a mocked S3 client, including the document-deleted
race and the subject mismatch guard.

System role: Verification of the ingestion pipeline
"""

import uuid
from unittest.mock import MagicMock

import pytest

from askmynotes.boundary.db.CRUD.chunk_crud import chunk_crud
from askmynotes.boundary.db.CRUD.document_crud import document_crud
from askmynotes.configs.ingestion import IngestionSettings
from askmynotes.core.document_processing.pipeline import DocumentProcessor
from askmynotes.core.document_processing.text_extractor import TextExtractor, placeholder_text
from askmynotes.core.exceptions import (
    ChunkingConfigError,
    DocumentVanishedError,
    StorageError,
    ValidationError,
)

NOTES = ("Mitosis has four phases. " * 100).encode("utf-8")


@pytest.fixture
def mock_storage() -> MagicMock:
    """S3 client returning 2500 bytes of notes."""
    storage = MagicMock()
    storage.download_bytes.return_value = NOTES
    return storage


@pytest.fixture
def processor(mock_storage: MagicMock, ingestion_settings: IngestionSettings) -> DocumentProcessor:
    return DocumentProcessor(mock_storage, TextExtractor(), ingestion_settings)


@pytest.fixture
async def uploaded_document(test_async_db, biology_subject):
    """Committed document row with no chunks yet."""
    document = await document_crud.create(
        test_async_db,
        subject_id=biology_subject.id,
        filename="bio.txt",
        storage_path="device-1/bio.txt",
        file_size=len(NOTES),
    )
    await test_async_db.commit()
    return document


class TestDocumentProcessorInit:
    """Test suite for window validation at construction."""

    def test_invalid_window_should_raise(self, mock_storage: MagicMock) -> None:
        settings = IngestionSettings.model_construct(chunk_size=100, chunk_overlap=100)

        with pytest.raises(ChunkingConfigError):
            DocumentProcessor(mock_storage, TextExtractor(), settings)


class TestProcess:
    """Test suite for DocumentProcessor.process()."""

    async def test_should_store_ordered_chunks(
        self, processor, mock_storage, test_async_db, biology_subject, uploaded_document
    ) -> None:
        # Act
        result = await processor.process(
            test_async_db,
            document_id=uploaded_document.id,
            subject_id=biology_subject.id,
            storage_path="device-1/bio.txt",
            filename="bio.txt",
        )
        await test_async_db.commit()

        # Assert
        assert result.chunk_count == 4
        assert result.extracted_chars == 2500
        mock_storage.download_bytes.assert_called_once_with("device-1/bio.txt")
        chunks = await chunk_crud.list_for_subject(test_async_db, biology_subject.id)
        assert [c.chunk_index for c in chunks] == [0, 1, 2, 3]
        assert all(c.document_id == uploaded_document.id for c in chunks)
        assert all(c.page_number == 1 for c in chunks)

    async def test_empty_file_should_store_placeholder_chunk(
        self, processor, mock_storage, test_async_db, biology_subject, uploaded_document
    ) -> None:
        """Test a 0-byte upload still yields one chunk."""
        mock_storage.download_bytes.return_value = b""

        result = await processor.process(
            test_async_db, uploaded_document.id, biology_subject.id, "device-1/bio.txt", "bio.txt"
        )

        assert result.chunk_count == 1
        chunks = await chunk_crud.list_for_subject(test_async_db, biology_subject.id)
        assert chunks[0].content == placeholder_text("bio.txt")

    async def test_deleted_document_should_raise_vanished(
        self, processor, test_async_db, biology_subject
    ) -> None:
        """Test no chunks are written when the document no longer exists."""
        missing_id = uuid.uuid4()

        with pytest.raises(DocumentVanishedError):
            await processor.process(
                test_async_db, missing_id, biology_subject.id, "device-1/bio.txt", "bio.txt"
            )

        assert await chunk_crud.count_for_document(test_async_db, missing_id) == 0

    async def test_subject_mismatch_should_raise(
        self, processor, test_async_db, uploaded_document
    ) -> None:
        with pytest.raises(ValidationError):
            await processor.process(
                test_async_db, uploaded_document.id, uuid.uuid4(), "device-1/bio.txt", "bio.txt"
            )

        assert await chunk_crud.count_for_document(test_async_db, uploaded_document.id) == 0

    async def test_storage_failure_should_propagate(
        self, processor, mock_storage, test_async_db, biology_subject, uploaded_document
    ) -> None:
        mock_storage.download_bytes.side_effect = StorageError("File not found in S3: x", "x")

        with pytest.raises(StorageError):
            await processor.process(
                test_async_db, uploaded_document.id, biology_subject.id, "device-1/bio.txt", "bio.txt"
            )

    async def test_mismatched_storage_path_should_raise_before_download(
        self, processor, mock_storage, test_async_db, biology_subject, uploaded_document
    ) -> None:
        with pytest.raises(ValidationError):
            await processor.process(
                test_async_db, uploaded_document.id, biology_subject.id, "device-2/other.txt", "bio.txt"
            )

        mock_storage.download_bytes.assert_not_called()

    async def test_second_run_should_not_insert_again(
        self, processor, mock_storage, test_async_db, biology_subject, uploaded_document
    ) -> None:
        """Test processing an already chunked document is a no-op instead of a unique violation."""
        # Arrange
        await processor.process(
            test_async_db, uploaded_document.id, biology_subject.id, "device-1/bio.txt", "bio.txt"
        )
        await test_async_db.commit()

        # Act
        result = await processor.process(
            test_async_db, uploaded_document.id, biology_subject.id, "device-1/bio.txt", "bio.txt"
        )

        # Assert
        assert result.already_processed is True
        assert result.chunk_count == 4
        mock_storage.download_bytes.assert_called_once()
        assert await chunk_crud.count_for_document(test_async_db, uploaded_document.id) == 4
