"""
Subject API endpoints.

Routes:
- POST /subjects - Create subject for the calling session
- GET /subjects - List the session's subjects
- DELETE /subjects/{subject_id} - Delete subject with all its data

Dependencies: askmynotes.application.services.subject_service
System role: Subject management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from askmynotes.api.deps import get_session_context, get_subject_service
from askmynotes.api.routers.router_utils import handle_notes_errors
from askmynotes.application.services.subject_service import SubjectService
from askmynotes.application.session_context import SessionContext
from askmynotes.models.subject import (
    CreateSubjectRequest,
    SubjectListResponse,
    SubjectResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
@handle_notes_errors
async def create_subject(
    request: CreateSubjectRequest,
    session: SessionContext = Depends(get_session_context),
    subject_service: SubjectService = Depends(get_subject_service),
) -> SubjectResponse:
    """
    Create a subject.

    Raises:
        400: Blank name or the session already has the maximum number of subjects
    """
    subject = await subject_service.create_subject(session, request.name)
    return SubjectResponse.model_validate(subject)


@router.get("", response_model=SubjectListResponse)
@handle_notes_errors
async def list_subjects(
    session: SessionContext = Depends(get_session_context),
    subject_service: SubjectService = Depends(get_subject_service),
) -> SubjectListResponse:
    """List the calling session's subjects, oldest first."""
    subjects = await subject_service.list_subjects(session)
    return SubjectListResponse(
        subjects=[SubjectResponse.model_validate(s) for s in subjects],
        limit=subject_service.max_subjects,
    )


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_notes_errors
async def delete_subject(
    subject_id: UUID,
    session: SessionContext = Depends(get_session_context),
    subject_service: SubjectService = Depends(get_subject_service),
) -> Response:
    """
    Delete a subject and, by cascade, its documents, chunks and messages.

    Raises:
        404: Subject not found for this session
    """
    await subject_service.delete_subject(session, subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
