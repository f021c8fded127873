"""
Test suite for conversation state helpers.

System role: Verification of history bounding and message conversion
"""

from langchain_core.messages import AIMessage, HumanMessage

from askmynotes.core.grounding.conversation import (
    ConversationMode,
    ConversationTurn,
    bounded_history,
    to_messages,
)


class TestBoundedHistory:
    """Test suite for bounded_history()."""

    def test_none_should_be_empty(self) -> None:
        assert bounded_history(None) == []

    def test_should_keep_most_recent_turns(self) -> None:
        turns = [ConversationTurn(role="user", content=str(i)) for i in range(12)]

        kept = bounded_history(turns, limit=10)

        assert [t.content for t in kept] == [str(i) for i in range(2, 12)]

    def test_zero_limit_should_drop_everything(self) -> None:
        assert bounded_history([ConversationTurn(role="user", content="hi")], limit=0) == []


class TestToMessages:
    """Test suite for to_messages()."""

    def test_roles_should_map_to_message_types(self) -> None:
        messages = to_messages([
            ConversationTurn(role="user", content="What is mitosis?"),
            ConversationTurn(role="assistant", content="Cell division."),
        ])

        assert isinstance(messages[0], HumanMessage)
        assert isinstance(messages[1], AIMessage)
        assert messages[1].content == "Cell division."


class TestConversationMode:
    """Test suite for ConversationMode wire values."""

    def test_wire_values(self) -> None:
        assert ConversationMode("chat") is ConversationMode.CHAT
        assert ConversationMode("voice_call") is ConversationMode.VOICE_CALL
