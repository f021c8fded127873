"""
Document service orchestrator.

Upload: validate, store the raw file, create the document row and refresh
the subject's document count. Processing: run the ingestion pipeline for
one document and commit its chunks.

Dependencies: askmynotes.boundary, askmynotes.core.document_processing
System role: Document use case orchestration
"""

import logging
from pathlib import PurePosixPath
from typing import Sequence
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.application.services.subject_service import resolve_subject
from askmynotes.application.session_context import SessionContext
from askmynotes.boundary.db.CRUD.document_crud import document_crud
from askmynotes.boundary.db.CRUD.subject_crud import subject_crud
from askmynotes.boundary.db.models.document_model import DocumentModel
from askmynotes.boundary.storage.s3_client import S3DocumentClient, build_storage_path
from askmynotes.configs.ingestion import IngestionSettings
from askmynotes.core.document_processing.models import PipelineResult
from askmynotes.core.document_processing.pipeline import DocumentProcessor
from askmynotes.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {".pdf": "application/pdf", ".txt": "text/plain"}


def check_upload_size(byte_size: int, limit: int) -> None:
    """Raise ValidationError when an upload is over the byte limit."""
    if byte_size > limit:
        raise ValidationError(f"File exceeds the {limit} byte limit", field="file")


class DocumentService:
    """Document service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        storage: S3DocumentClient,
        settings: IngestionSettings,
        processor: DocumentProcessor | None = None,
    ) -> None:
        """
        Args:
            db: Async SQLAlchemy session
            storage: Document bucket client
            settings: Upload limits and allowed extensions
            processor: Ingestion pipeline (required for process_document)
        """
        self.db = db
        self.storage = storage
        self.settings = settings
        self.processor = processor

    def _validate_upload(self, filename: str, data: bytes) -> str:
        name = PurePosixPath((filename or "").replace("\\", "/")).name
        if not name:
            raise ValidationError("Filename is required", field="file")
        extension = PurePosixPath(name.lower()).suffix
        if extension not in self.settings.allowed_extensions:
            raise ValidationError(
                f"Unsupported file type '{extension or name}'. "
                f"Allowed: {', '.join(self.settings.allowed_extensions)}",
                field="file",
            )
        check_upload_size(len(data), self.settings.max_upload_bytes)
        return name

    async def upload_document(
        self,
        session: SessionContext,
        subject_id: UUID,
        filename: str,
        data: bytes,
    ) -> tuple[DocumentModel, int]:
        """
        Store an upload and register it.

        Args:
            session: Calling session
            subject_id: Target subject
            filename: Original filename
            data: File bytes

        Returns:
            (DocumentModel, subject document count after the upload)

        Raises:
            SubjectNotFoundError: Subject missing or not owned
            ValidationError: Bad extension or oversized file
            StorageError: Object store write failed
        """
        await resolve_subject(self.db, subject_id, session)
        name = self._validate_upload(filename, data)
        storage_path = build_storage_path(session.session_id, subject_id, name)
        content_type = CONTENT_TYPES.get(PurePosixPath(name.lower()).suffix, "application/octet-stream")

        await run_in_threadpool(self.storage.upload_bytes, storage_path, data, content_type)
        logger.info(
            "Document stored",
            extra={"subject_id": str(subject_id), "storage_path": storage_path, "byte_size": len(data)},
        )

        try:
            document = await document_crud.create(
                self.db,
                subject_id=subject_id,
                filename=name,
                storage_path=storage_path,
                file_size=len(data),
            )
            count = await subject_crud.refresh_document_count(self.db, subject_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.exception(
                "Document row creation failed, removing stored object",
                extra={"subject_id": str(subject_id), "storage_path": storage_path},
            )
            await run_in_threadpool(self.storage.delete, storage_path)
            raise

        logger.info(
            "Document registered",
            extra={"document_id": str(document.id), "subject_id": str(subject_id), "document_count": count},
        )
        return document, count

    async def list_documents(
        self,
        session: SessionContext,
        subject_id: UUID,
    ) -> Sequence[DocumentModel]:
        """Documents of an owned subject in upload order."""
        await resolve_subject(self.db, subject_id, session)
        return await document_crud.list_by_subject(self.db, subject_id)

    async def process_document(
        self,
        document_id: UUID,
        subject_id: UUID,
        storage_path: str,
        filename: str,
    ) -> PipelineResult:
        """
        Run the ingestion pipeline for one document and commit its chunks.

        Raises:
            DocumentVanishedError: Document deleted during processing
            ValidationError: Document/subject mismatch
            StorageError: Raw file unreadable
        """
        if self.processor is None:
            raise RuntimeError("DocumentService was created without a DocumentProcessor")
        try:
            result = await self.processor.process(
                self.db,
                document_id=document_id,
                subject_id=subject_id,
                storage_path=storage_path,
                filename=filename,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return result
