"""
Exception hierarchy for Ask My Notes.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class AskMyNotesException(Exception):
    """Base exception for all Ask My Notes application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(AskMyNotesException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(AskMyNotesException):
    """A referenced subject or document does not exist."""


class SubjectNotFoundError(NotFoundError):
    """Raised when a subject cannot be found (or is not owned by the caller)."""

    def __init__(self, subject_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["subject_id"] = subject_id
        super().__init__("Subject not found", details)


class SubjectLimitReachedError(AskMyNotesException):
    """Raised when a session already owns the maximum number of subjects."""

    def __init__(self, limit: int, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["limit"] = limit
        super().__init__(f"A session can have at most {limit} subjects", details)


class UpstreamError(AskMyNotesException):
    """Base class for failures of the generation capability."""

    retryable: bool = False


class UpstreamRateLimitedError(UpstreamError):
    """The generation provider rejected the call with a rate limit."""

    retryable = True

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("Rate limit exceeded. Please try again shortly.", details)


class UpstreamQuotaExhaustedError(UpstreamError):
    """The generation provider reports exhausted quota or billing."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("Usage limit reached. Please add credits.", details)


class GenerationError(UpstreamError):
    """Any other non-success outcome of a generation call."""


class DocumentProcessingError(AskMyNotesException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class DocumentVanishedError(DocumentProcessingError):
    """The owning document was deleted while its chunks were being prepared."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            "Document was deleted during processing",
            document_id=document_id,
            details=details,
        )


class ChunkingConfigError(DocumentProcessingError):
    """Chunk window parameters that would never advance or make no sense."""

    def __init__(self, chunk_size: int, chunk_overlap: int) -> None:
        super().__init__(
            f"Invalid chunking configuration: overlap {chunk_overlap} must be "
            f"non-negative and smaller than size {chunk_size}",
            details={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
        )


class StorageError(AskMyNotesException):
    """Raised when the object store cannot read or write a file."""

    def __init__(
        self,
        message: str,
        storage_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if storage_path:
            details["storage_path"] = storage_path
        super().__init__(message, details)
