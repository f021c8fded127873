"""
Document domain models and schemas.

Dependencies: pydantic
System role: Document upload and processing API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """Document metadata as returned to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    subject_id: UUID
    filename: str
    storage_path: str
    file_size: int
    created_at: datetime


class UploadDocumentResponse(BaseModel):
    """Upload acknowledgement; chunking continues in the background."""

    document: DocumentResponse
    document_count: int = Field(description="Subject document count after this upload")
    processing: str = Field(default="dispatched", description="Background processing state")


class ProcessDocumentRequest(BaseModel):
    """Internal post-upload processing request."""

    document_id: UUID
    subject_id: UUID
    storage_path: str = Field(min_length=1)
    filename: str = Field(min_length=1)


class ProcessDocumentResponse(BaseModel):
    """Processing outcome."""

    success: bool = True
    chunks_created: int
    already_processed: bool = Field(default=False, description="Chunks existed; nothing was inserted")
