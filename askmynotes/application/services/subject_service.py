"""
Subject service orchestrator.

Creates, lists and deletes the subjects of one anonymous session and
enforces the per-session subject limit.

Dependencies: askmynotes.boundary.db.CRUD, askmynotes.boundary.storage
System role: Subject use case orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.application.session_context import SessionContext
from askmynotes.boundary.db.CRUD.document_crud import document_crud
from askmynotes.boundary.db.CRUD.subject_crud import subject_crud
from askmynotes.boundary.db.models.subject_model import SubjectModel
from askmynotes.boundary.storage.s3_client import S3DocumentClient
from askmynotes.core.exceptions import (
    StorageError,
    SubjectLimitReachedError,
    SubjectNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def resolve_subject(
    db: AsyncSession,
    subject_id: UUID,
    session: SessionContext | None = None,
) -> SubjectModel:
    """
    Load a subject, scoped to the caller's session when one is given.

    Args:
        db: Async database session
        subject_id: Subject to load
        session: Calling session; None skips the ownership check

    Returns:
        SubjectModel

    Raises:
        SubjectNotFoundError: Missing, or owned by another session
    """
    if session is None:
        subject = await subject_crud.get_by_id(db, subject_id)
    else:
        subject = await subject_crud.get_owned(db, subject_id, session.session_id)
    if subject is None:
        raise SubjectNotFoundError(str(subject_id))
    return subject


class SubjectService:
    """Subject service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        max_subjects: int,
        storage: S3DocumentClient | None = None,
    ) -> None:
        """
        Args:
            db: Async SQLAlchemy session
            max_subjects: Subjects one session may own
            storage: Document bucket, used to remove files of deleted subjects
        """
        self.db = db
        self.max_subjects = max_subjects
        self.storage = storage

    async def create_subject(self, session: SessionContext, name: str) -> SubjectModel:
        """
        Create a subject for the calling session.

        Raises:
            ValidationError: Blank name
            SubjectLimitReachedError: Session already owns `max_subjects`
        """
        name = name.strip()
        if not name:
            raise ValidationError("Subject name cannot be empty", field="name")

        existing = await subject_crud.count_by_session(self.db, session.session_id)
        if existing >= self.max_subjects:
            raise SubjectLimitReachedError(self.max_subjects, {"session_id": session.session_id})

        subject = await subject_crud.create(
            self.db,
            name=name,
            session_id=session.session_id,
            document_count=0,
        )
        await self.db.commit()
        logger.info(
            "Subject created",
            extra={"subject_id": str(subject.id), "subject_name": name, "existing": existing},
        )
        return subject

    async def list_subjects(self, session: SessionContext) -> Sequence[SubjectModel]:
        """Subjects of the calling session, oldest first."""
        return await subject_crud.list_by_session(self.db, session.session_id)

    async def delete_subject(self, session: SessionContext, subject_id: UUID) -> None:
        """
        Delete a subject with its documents, chunks and chat log.

        Rows go through ON DELETE CASCADE. Stored files are removed after the
        commit; a failure there leaves an orphan object and is only logged.

        Raises:
            SubjectNotFoundError: Missing, or owned by another session
        """
        await resolve_subject(self.db, subject_id, session)
        documents = await document_crud.list_by_subject(self.db, subject_id)
        storage_paths = [doc.storage_path for doc in documents]

        await subject_crud.delete_by_id(self.db, subject_id)
        await self.db.commit()
        logger.info(
            "Subject deleted",
            extra={"subject_id": str(subject_id), "documents": len(storage_paths)},
        )

        if self.storage is None:
            return
        for path in storage_paths:
            try:
                await run_in_threadpool(self.storage.delete, path)
            except StorageError as e:
                logger.warning(
                    "Failed to remove stored document",
                    extra={"subject_id": str(subject_id), "storage_path": path, "error": e.message},
                )
