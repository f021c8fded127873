"""
Chat API endpoints.

Routes:
- POST /chat - Ask a question answered only from a subject's notes
- GET /subjects/{subject_id}/messages - Stored chat log of a subject

Dependencies: askmynotes.application.services.chat_service
System role: Grounded chat HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from askmynotes.api.deps import get_chat_service, get_optional_session_context
from askmynotes.api.routers.router_utils import handle_notes_errors
from askmynotes.application.services.chat_service import ChatService
from askmynotes.application.session_context import SessionContext
from askmynotes.boundary.db.models.chat_message_model import ChatMessageModel
from askmynotes.core.grounding.answer_schema import GroundedAnswer
from askmynotes.models.chat import ChatHistoryResponse, ChatMessageResponse, ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


def map_message_to_response(message: ChatMessageModel) -> ChatMessageResponse:
    """Convert a stored chat turn to its API shape."""
    return ChatMessageResponse(
        id=message.id,
        role=message.role.value,
        content=message.content,
        citations=message.citations,
        evidence=message.evidence,
        confidence=message.confidence,
        created_at=message.created_at,
    )


@router.post("/chat", response_model=GroundedAnswer)
@handle_notes_errors
async def chat(
    request: ChatRequest,
    session: SessionContext | None = Depends(get_optional_session_context),
    chat_service: ChatService = Depends(get_chat_service),
) -> GroundedAnswer:
    """
    Answer a question from a subject's notes.

    Flow:
    1. ChatService resolves the subject and assembles its context
    2. The answer engine returns content, citations, evidence and confidence
    3. User and assistant turns are logged without delaying the response

    Raises:
        404: Subject not found
        429: Model provider rate limit
        402: Model provider quota exhausted
        500: Any other failure
    """
    logger.info(
        f"{__name__}:chat - START",
        extra={"subject_id": str(request.subject_id), "mode": request.mode.value},
    )
    return await chat_service.ask(
        subject_id=request.subject_id,
        question=request.question,
        history=request.conversation_history,
        mode=request.mode,
        session=session,
    )


@router.get("/subjects/{subject_id}/messages", response_model=ChatHistoryResponse)
@handle_notes_errors
async def get_messages(
    subject_id: UUID,
    session: SessionContext | None = Depends(get_optional_session_context),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    """Stored chat log of a subject, oldest first."""
    messages = await chat_service.get_history(subject_id, session)
    return ChatHistoryResponse(
        messages=[map_message_to_response(m) for m in messages],
        total=len(messages),
    )
