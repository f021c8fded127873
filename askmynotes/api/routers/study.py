"""
Study API endpoints.

Routes:
- POST /study - Generate 5 MCQs and 3 short-answer questions from a subject's notes

Dependencies: askmynotes.application.services.study_service
System role: Study set HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from askmynotes.api.deps import get_optional_session_context, get_study_service
from askmynotes.api.routers.router_utils import handle_notes_errors
from askmynotes.application.services.study_service import StudyService
from askmynotes.application.session_context import SessionContext
from askmynotes.core.grounding.study_schema import StudySet
from askmynotes.models.study import StudyRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["study"])


@router.post("/study", response_model=StudySet)
@handle_notes_errors
async def generate_study_set(
    request: StudyRequest,
    session: SessionContext | None = Depends(get_optional_session_context),
    study_service: StudyService = Depends(get_study_service),
) -> StudySet:
    """
    Generate a study set.

    Returns `{"mcqs": [], "shortAnswers": []}` when the subject has no notes.

    Raises:
        404: Subject not found
        500: Generation failure
    """
    return await study_service.generate_study_set(request.subject_id, session)
