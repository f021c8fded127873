"""
Subject domain models and schemas.

Dependencies: pydantic
System role: Subject API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateSubjectRequest(BaseModel):
    """Request schema for subject creation."""

    name: str = Field(min_length=1, max_length=255, description="Subject display name")


class SubjectResponse(BaseModel):
    """Subject as returned to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    session_id: str
    document_count: int
    created_at: datetime


class SubjectListResponse(BaseModel):
    """Subjects owned by the calling session."""

    subjects: list[SubjectResponse]
    limit: int = Field(description="Maximum subjects per session")
