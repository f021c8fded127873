"""
Models for the document processing pipeline.

Dependencies: pydantic
System role: Data structures passed between extraction, chunking and persistence
"""

from pydantic import BaseModel, Field


class ChunkDraft(BaseModel):
    """A chunk ready to be persisted."""

    content: str = Field(description="Chunk text content")
    page_number: int | None = Field(default=None, description="Estimated page (approximate)")
    chunk_index: int = Field(ge=0, description="Zero-based ordinal within the document")


class PipelineResult(BaseModel):
    """Result of processing one uploaded document."""

    document_id: str = Field(description="Processed document identifier")
    chunk_count: int = Field(description="Number of chunks inserted")
    extracted_chars: int = Field(description="Length of the extracted text")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
    already_processed: bool = Field(
        default=False,
        description="True when the document already had chunks and nothing was inserted",
    )
