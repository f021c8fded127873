"""Service orchestrators."""

from .chat_service import ChatService
from .document_service import DocumentService
from .study_service import StudyService
from .subject_service import SubjectService

__all__ = [
    "ChatService",
    "DocumentService",
    "StudyService",
    "SubjectService",
]
