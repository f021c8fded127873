"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from askmynotes.boundary.db.CRUD import subject_crud, chunk_crud

    subject = await subject_crud.get_by_id(db, subject_id)
"""

from askmynotes.boundary.db.CRUD.base_crud import BaseCRUD
from askmynotes.boundary.db.CRUD.subject_crud import SubjectCRUD, subject_crud
from askmynotes.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from askmynotes.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from askmynotes.boundary.db.CRUD.chat_message_crud import ChatMessageCRUD, chat_message_crud

__all__ = [
    "BaseCRUD",
    "SubjectCRUD",
    "subject_crud",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "ChatMessageCRUD",
    "chat_message_crud",
]
