"""
Document API endpoints.

Routes:
- POST /subjects/{subject_id}/documents - Upload a .pdf/.txt; chunking runs in background
- GET /subjects/{subject_id}/documents - List a subject's documents
- POST /documents/process - Process a stored document (internal, post-upload)

Dependencies: askmynotes.application.services.document_service
System role: Document upload and ingestion HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile, status

from askmynotes.api.deps import get_document_service, get_service_cache, get_session_context
from askmynotes.api.routers.router_utils import handle_notes_errors
from askmynotes.application.services.document_service import DocumentService, check_upload_size
from askmynotes.application.session_context import SessionContext
from askmynotes.core.exceptions import DocumentVanishedError
from askmynotes.models.document import (
    DocumentResponse,
    ProcessDocumentRequest,
    ProcessDocumentResponse,
    UploadDocumentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


async def read_upload(file: UploadFile, limit: int) -> bytes:
    """
    Read an upload without buffering more than limit + 1 bytes.

    A declared size over the limit is rejected before any read. Otherwise at
    most one byte past the limit is read so oversized bodies still fail the
    size check.

    Raises:
        ValidationError: File is larger than limit
    """
    if file.size is not None:
        check_upload_size(file.size, limit)
    data = await file.read(limit + 1)
    check_upload_size(len(data), limit)
    return data


async def process_document_background(
    document_id: UUID,
    subject_id: UUID,
    storage_path: str,
    filename: str,
) -> None:
    """
    Background task for post-upload processing.

    Runs after the upload response with its own database session. Failures
    are logged; the upload itself has already succeeded.

    Args:
        document_id: Document UUID
        subject_id: Subject UUID
        storage_path: Object key of the raw file
        filename: Original filename
    """
    from askmynotes.boundary.db.connection import get_async_session_factory

    logger.info(
        "Starting background document processing",
        extra={"document_id": str(document_id), "subject_id": str(subject_id)},
    )
    cache = get_service_cache()
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as db:
        service = DocumentService(
            db=db,
            storage=cache.s3_client,
            settings=cache.settings.ingestion,
            processor=cache.document_processor,
        )
        try:
            result = await service.process_document(
                document_id=document_id,
                subject_id=subject_id,
                storage_path=storage_path,
                filename=filename,
            )
        except DocumentVanishedError as e:
            logger.warning(
                "Document deleted during processing, chunks discarded",
                extra={"document_id": str(document_id), "error": e.message},
            )
            return
        except Exception as e:
            logger.exception(
                "Document processing failed",
                extra={
                    "document_id": str(document_id),
                    "subject_id": str(subject_id),
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return

    logger.info(
        "Document processing completed",
        extra={"document_id": str(document_id), "chunks": result.chunk_count},
    )


@router.post(
    "/subjects/{subject_id}/documents",
    response_model=UploadDocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_notes_errors
async def upload_document(
    subject_id: UUID,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    session: SessionContext = Depends(get_session_context),
    document_service: DocumentService = Depends(get_document_service),
) -> UploadDocumentResponse:
    """
    Upload a document into a subject.

    Returns once the file is stored and the document row committed;
    extraction and chunking are dispatched to the background.

    Raises:
        400: Unsupported extension or oversized file
        404: Subject not found for this session
    """
    data = await read_upload(file, document_service.settings.max_upload_bytes)
    document, count = await document_service.upload_document(
        session=session,
        subject_id=subject_id,
        filename=file.filename or "",
        data=data,
    )
    background_tasks.add_task(
        process_document_background,
        document_id=document.id,
        subject_id=subject_id,
        storage_path=document.storage_path,
        filename=document.filename,
    )
    return UploadDocumentResponse(
        document=DocumentResponse.model_validate(document),
        document_count=count,
    )


@router.get("/subjects/{subject_id}/documents", response_model=list[DocumentResponse])
@handle_notes_errors
async def list_documents(
    subject_id: UUID,
    session: SessionContext = Depends(get_session_context),
    document_service: DocumentService = Depends(get_document_service),
) -> list[DocumentResponse]:
    """List a subject's documents in upload order."""
    documents = await document_service.list_documents(session, subject_id)
    return [DocumentResponse.model_validate(d) for d in documents]


@router.post("/documents/process", response_model=ProcessDocumentResponse)
@handle_notes_errors
async def process_document(
    request: ProcessDocumentRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> ProcessDocumentResponse:
    """
    Extract, chunk and store one uploaded document.

    Repeating the call for a document that already has chunks is a no-op.

    Raises:
        400: Subject or storage path does not match the document
        404: Document deleted before its chunks were stored
        500: Download, extraction or persistence failure
    """
    result = await document_service.process_document(
        document_id=request.document_id,
        subject_id=request.subject_id,
        storage_path=request.storage_path,
        filename=request.filename,
    )
    if result.already_processed:
        return ProcessDocumentResponse(success=True, chunks_created=0, already_processed=True)
    return ProcessDocumentResponse(success=True, chunks_created=result.chunk_count)
