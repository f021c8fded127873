"""
Document processing pipeline.

Check row -> download -> extract -> chunk -> verify owner -> bulk insert.
A document that already has chunks is left alone. Runs after the
upload response has been sent, so a document can be deleted (through its
subject) while this is in flight; the owner check right before the insert
turns that race into a logged DocumentVanishedError instead of orphan rows.

Dependencies: fastapi.concurrency, sqlalchemy, askmynotes.boundary
System role: Post-upload ingestion orchestrator
"""

import logging
import time
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.boundary.db.CRUD.chunk_crud import chunk_crud
from askmynotes.boundary.db.CRUD.document_crud import document_crud
from askmynotes.boundary.storage.s3_client import S3DocumentClient
from askmynotes.configs.ingestion import IngestionSettings
from askmynotes.core.document_processing.chunker import build_chunks, validate_window
from askmynotes.core.document_processing.models import PipelineResult
from askmynotes.core.document_processing.text_extractor import TextExtractor
from askmynotes.core.exceptions import DocumentVanishedError, ValidationError

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """Turn one stored upload into persisted chunks."""

    def __init__(
        self,
        storage: S3DocumentClient,
        extractor: TextExtractor,
        settings: IngestionSettings,
    ) -> None:
        """
        Args:
            storage: Object store holding the raw file
            extractor: Bytes-to-text converter
            settings: Chunk window settings

        Raises:
            ChunkingConfigError: If the window can never advance
        """
        validate_window(settings.chunk_size, settings.chunk_overlap)
        self._storage = storage
        self._extractor = extractor
        self._settings = settings

    async def process(
        self,
        db: AsyncSession,
        document_id: UUID,
        subject_id: UUID,
        storage_path: str,
        filename: str,
    ) -> PipelineResult:
        """
        Extract, chunk and store one document.

        Flushes but does not commit; the caller owns the transaction.

        Args:
            db: Async database session
            document_id: Document being processed
            subject_id: Subject the caller believes owns the document
            storage_path: Object key of the raw file
            filename: Original filename

        Returns:
            PipelineResult: Number of chunks and timing

        Raises:
            DocumentVanishedError: Document deleted before chunks were inserted
            ValidationError: Document row has another subject or storage path
            StorageError: Raw file could not be read
        """
        start = time.time()
        logger.info(
            f"{__name__}:process - START",
            extra={"document_id": str(document_id), "subject_id": str(subject_id)},
        )

        document = await document_crud.get_by_id(db, document_id)
        if document is None:
            raise DocumentVanishedError(str(document_id))
        if document.subject_id != subject_id or document.storage_path != storage_path:
            raise ValidationError(
                "Document does not match the submitted subject or storage path",
                details={"document_id": str(document_id), "subject_id": str(subject_id)},
            )

        existing = await chunk_crud.count_for_document(db, document_id)
        if existing:
            logger.info(
                f"{__name__}:process - Already chunked, skipping",
                extra={"document_id": str(document_id), "chunks": existing},
            )
            return PipelineResult(
                document_id=str(document_id),
                chunk_count=existing,
                extracted_chars=0,
                processing_time_ms=round((time.time() - start) * 1000, 2),
                already_processed=True,
            )

        data = await run_in_threadpool(self._storage.download_bytes, storage_path)
        logger.info(
            f"{__name__}:process - Step 1 downloaded",
            extra={"document_id": str(document_id), "byte_size": len(data)},
        )

        text = await self._extractor.extract(data, filename)
        drafts = build_chunks(text, self._settings.chunk_size, self._settings.chunk_overlap)
        logger.info(
            f"{__name__}:process - Step 2 extracted and chunked",
            extra={"document_id": str(document_id), "chars": len(text), "chunks": len(drafts)},
        )

        owner = await document_crud.get_subject_id(db, document_id)
        if owner is None:
            logger.warning(
                f"{__name__}:process - Document vanished before chunk insert, aborting",
                extra={"document_id": str(document_id)},
            )
            raise DocumentVanishedError(str(document_id))
        if owner != subject_id:
            raise ValidationError(
                "Document does not belong to subject",
                field="subject_id",
                details={"document_id": str(document_id), "subject_id": str(subject_id)},
            )

        await chunk_crud.bulk_create(db, document_id, subject_id, drafts)

        elapsed_ms = round((time.time() - start) * 1000, 2)
        logger.info(
            f"{__name__}:process - DONE",
            extra={"document_id": str(document_id), "chunks": len(drafts), "ms": elapsed_ms},
        )
        return PipelineResult(
            document_id=str(document_id),
            chunk_count=len(drafts),
            extracted_chars=len(text),
            processing_time_ms=elapsed_ms,
        )
