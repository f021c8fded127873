"""ORM models registered on Base.metadata."""

from askmynotes.boundary.db.models.subject_model import SubjectModel
from askmynotes.boundary.db.models.document_model import DocumentModel
from askmynotes.boundary.db.models.chunk_model import ChunkModel
from askmynotes.boundary.db.models.chat_message_model import ChatMessageModel, MessageRole

__all__ = [
    "SubjectModel",
    "DocumentModel",
    "ChunkModel",
    "ChatMessageModel",
    "MessageRole",
]
