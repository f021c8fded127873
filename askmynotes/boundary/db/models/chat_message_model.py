"""
Chat message ORM model.

Append-only conversation log per subject. Assistant rows carry the
grounding payload (citations, evidence, confidence); user rows never do.

Dependencies: sqlalchemy, askmynotes.boundary.db.base
System role: Conversation log persistence
"""

import enum
from uuid import UUID

from sqlalchemy import JSON, Enum as SAEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askmynotes.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class MessageRole(str, enum.Enum):
    """Author of a chat turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessageModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Chat message ORM model.

    Attributes:
        id: UUID primary key
        subject_id: Owning subject (ON DELETE CASCADE)
        role: user or assistant (CHECK constraint)
        content: Turn text
        citations: Ordered [{filename, page}] (assistant only)
        evidence: Ordered [{quote, page, section, lines}] (assistant only)
        confidence: High / Medium / Low (assistant only)
        created_at: Turn time captured when the request was handled
    """

    __tablename__ = "chat_messages"

    subject_id: Mapped[UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MessageRole] = mapped_column(
        SAEnum(
            MessageRole,
            name="message_role",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    citations: Mapped[list | None] = mapped_column(JSON, nullable=True, default=None)
    evidence: Mapped[list | None] = mapped_column(JSON, nullable=True, default=None)
    confidence: Mapped[str | None] = mapped_column(String(16), nullable=True, default=None)

    subject = relationship("SubjectModel", back_populates="messages")
