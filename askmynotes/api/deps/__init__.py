"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_chat_service,
    get_document_service,
    get_optional_session_context,
    get_service_cache,
    get_session_context,
    get_study_service,
    get_subject_service,
)

__all__ = [
    "get_chat_service",
    "get_document_service",
    "get_optional_session_context",
    "get_service_cache",
    "get_session_context",
    "get_study_service",
    "get_subject_service",
]
