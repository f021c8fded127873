"""
Chat domain models and schemas.

Request/response schemas for grounded question answering.

Dependencies: pydantic
System role: Chat API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from askmynotes.core.grounding.answer_schema import EvidenceItem, SourceCitation
from askmynotes.core.grounding.conversation import ConversationMode, ConversationTurn


class ChatRequest(BaseModel):
    """Question about one subject's notes."""

    subject_id: UUID
    question: str = Field(min_length=1, description="User question")
    conversation_history: list[ConversationTurn] | None = Field(
        default=None,
        description="Prior turns; when omitted the stored chat log is used",
    )
    mode: ConversationMode = Field(default=ConversationMode.CHAT)


class ChatMessageResponse(BaseModel):
    """Single stored chat turn."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    role: str
    content: str
    citations: list[SourceCitation] | None = None
    evidence: list[EvidenceItem] | None = None
    confidence: str | None = None
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    """A subject's chat log."""

    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages")
