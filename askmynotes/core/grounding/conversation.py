"""
Conversation state.

Conversation mode, turn representation, the bounded history window and the
request stage names used in answer-engine logs.

Dependencies: langchain_core.messages, pydantic
System role: Multi-turn state passed into grounded generation
"""

from enum import Enum
from typing import Iterable, Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, Field

HISTORY_WINDOW = 10


class ConversationMode(str, Enum):
    """Register of the conversation: typed chat or spoken voice call."""

    CHAT = "chat"
    VOICE_CALL = "voice_call"


class RequestStage(str, Enum):
    """Lifecycle of one grounded-answer request."""

    RECEIVED = "received"
    CONTEXT_ASSEMBLED = "context_assembled"
    GENERATION_REQUESTED = "generation_requested"
    STRUCTURED_RESULT = "structured_result"
    FALLBACK_TEXT = "fallback_text"
    ERROR = "error"


class ConversationTurn(BaseModel):
    """One prior turn supplied with a question."""

    role: Literal["user", "assistant"] = Field(description="Turn author")
    content: str = Field(description="Turn text")


def bounded_history(
    turns: Iterable[ConversationTurn] | None,
    limit: int = HISTORY_WINDOW,
) -> list[ConversationTurn]:
    """Keep only the last `limit` turns."""
    if not turns or limit <= 0:
        return []
    return list(turns)[-limit:]


def to_messages(turns: Iterable[ConversationTurn]) -> list[BaseMessage]:
    """Convert turns to LangChain messages for the prompt's history slot."""
    return [
        HumanMessage(content=turn.content) if turn.role == "user" else AIMessage(content=turn.content)
        for turn in turns
    ]
