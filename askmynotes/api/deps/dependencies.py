"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators (model
client, S3 client, pipeline, engines) are built lazily once per process in
ServiceCache; services are built per request around the request's
database session.

Dependencies: askmynotes.configs, askmynotes.application, askmynotes.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.application.services import (
    ChatService,
    DocumentService,
    StudyService,
    SubjectService,
)
from askmynotes.application.session_context import SessionContext
from askmynotes.boundary.db.connection import get_async_db, get_async_session_factory
from askmynotes.configs import Settings, get_settings

SESSION_HEADER = "X-Session-ID"


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._generation_client = None
        self._s3_client = None
        self._text_extractor = None
        self._document_processor = None
        self._context_assembler = None
        self._answer_engine = None
        self._study_generator = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def generation_client(self):
        """Get cached Gemini generation client."""
        if self._generation_client is None:
            from askmynotes.core.grounding.generation import GenerationClient

            self._generation_client = GenerationClient(self.settings.generation)
        return self._generation_client

    @property
    def s3_client(self):
        """Get cached S3 document client."""
        if self._s3_client is None:
            from askmynotes.boundary.storage.s3_client import S3DocumentClient

            storage = self.settings.storage
            self._s3_client = S3DocumentClient(
                bucket=storage.bucket,
                region=storage.region,
                endpoint_url=storage.endpoint_url,
            )
        return self._s3_client

    @property
    def text_extractor(self):
        """Get cached text extractor."""
        if self._text_extractor is None:
            from askmynotes.core.document_processing.text_extractor import TextExtractor

            self._text_extractor = TextExtractor(self.generation_client)
        return self._text_extractor

    @property
    def document_processor(self):
        """Get cached document processing pipeline."""
        if self._document_processor is None:
            from askmynotes.core.document_processing.pipeline import DocumentProcessor

            self._document_processor = DocumentProcessor(
                storage=self.s3_client,
                extractor=self.text_extractor,
                settings=self.settings.ingestion,
            )
        return self._document_processor

    @property
    def context_assembler(self):
        """Get cached context assembler."""
        if self._context_assembler is None:
            from askmynotes.core.grounding.context_assembler import ContextAssembler

            self._context_assembler = ContextAssembler()
        return self._context_assembler

    @property
    def answer_engine(self):
        """Get cached grounded answer engine."""
        if self._answer_engine is None:
            from askmynotes.core.grounding.answer_engine import GroundedAnswerEngine

            self._answer_engine = GroundedAnswerEngine(
                self.generation_client,
                self.settings.generation,
            )
        return self._answer_engine

    @property
    def study_generator(self):
        """Get cached study set generator."""
        if self._study_generator is None:
            from askmynotes.core.grounding.study_generator import StudySetGenerator

            self._study_generator = StudySetGenerator(
                self.generation_client,
                self.settings.generation,
            )
        return self._study_generator

    def clear(self) -> None:
        """Clear all cached instances."""
        self.__init__(self._settings)


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_session_context(
    x_session_id: str | None = Header(default=None, alias=SESSION_HEADER),
) -> SessionContext:
    """
    Resolve the calling device's session from the X-Session-ID header.

    Raises:
        HTTPException(400): Header missing or blank
    """
    if not x_session_id or not x_session_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{SESSION_HEADER} header is required",
        )
    return SessionContext(session_id=x_session_id.strip()[:255])


def get_optional_session_context(
    x_session_id: str | None = Header(default=None, alias=SESSION_HEADER),
) -> SessionContext | None:
    """Session from X-Session-ID when sent; None otherwise."""
    if not x_session_id or not x_session_id.strip():
        return None
    return SessionContext(session_id=x_session_id.strip()[:255])


def get_subject_service(db: AsyncSession = Depends(get_async_db)) -> SubjectService:
    """
    Get subject service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SubjectService: Subject service instance
    """
    cache = get_service_cache()
    return SubjectService(
        db=db,
        max_subjects=cache.settings.max_subjects_per_session,
        storage=cache.s3_client,
    )


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentService: Document service with the ingestion pipeline
    """
    cache = get_service_cache()
    return DocumentService(
        db=db,
        storage=cache.s3_client,
        settings=cache.settings.ingestion,
        processor=cache.document_processor,
    )


def get_chat_service(db: AsyncSession = Depends(get_async_db)) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        ChatService: Chat service with the grounded answer engine
    """
    cache = get_service_cache()
    return ChatService(
        db=db,
        engine=cache.answer_engine,
        assembler=cache.context_assembler,
        session_factory=get_async_session_factory(),
        history_window=cache.settings.generation.history_window,
    )


def get_study_service(db: AsyncSession = Depends(get_async_db)) -> StudyService:
    """
    Get study service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        StudyService: Study service with the study set generator
    """
    cache = get_service_cache()
    return StudyService(
        db=db,
        generator=cache.study_generator,
        assembler=cache.context_assembler,
    )
