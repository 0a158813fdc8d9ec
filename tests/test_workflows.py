"""
Tests for the sample recipes.
"""

import pytest

from recipe.engine.executor import run
from recipe.engine.state import initial_state
from recipe.engine.telemetry import RecordingTelemetry
from recipe.registry import recipe_registry
from recipe.workflows import Arithmetic, DeleteConversation, StartNewConversation
from recipe.workflows.stores import ConversationStore, MessageStore, Outbox, StoreError


@pytest.fixture
def conversations():
    return ConversationStore()


@pytest.fixture
def messages():
    return MessageStore(max_length=20)


@pytest.fixture
def dispatcher():
    return Outbox()


@pytest.fixture
def start_conversation(conversations, messages, dispatcher):
    return StartNewConversation(conversations, messages, dispatcher)


# ============================================================
# Arithmetic
# ============================================================

class TestArithmetic:
    """Tests for the arithmetic recipe."""

    def test_registered(self):
        assert recipe_registry.resolve("arithmetic").recipe_cls is Arithmetic
        assert recipe_registry.resolve("arithmetic").steps == ["square", "double"]

    def test_square_then_double(self):
        outcome = run(Arithmetic, initial_state(number=4))
        assert outcome.as_tuple() == ("ok", outcome.correlation_id, 32)

    def test_run_by_name(self):
        """Test starting a run from the registered name."""
        outcome = run("arithmetic", initial_state(number=3))
        assert outcome.value == 18

    def test_not_a_number(self):
        outcome = run(Arithmetic, initial_state(number="four"))
        assert outcome.as_tuple() == ("error", ("square", {"error": "not_a_number"}))

    def test_bool_is_not_a_number(self):
        outcome = run(Arithmetic, initial_state(number=True))
        assert outcome.failed_step == "square"


# ============================================================
# Stores
# ============================================================

class TestStores:
    """Tests for the in-memory stores."""

    def test_delete_unknown_conversation(self, conversations):
        with pytest.raises(StoreError) as exc_info:
            conversations.delete("missing")
        assert exc_info.value.reason == "conversation_not_found"

    def test_message_too_long(self, messages):
        with pytest.raises(StoreError, match="message_too_long"):
            messages.create(1, "c1", "x" * 21)
        assert len(messages) == 0

    def test_list_by_conversation(self, messages):
        messages.create(1, "c1", "hi")
        messages.create(1, "c2", "there")
        assert [m.text for m in messages.list_by_conversation("c1")] == ["hi"]


# ============================================================
# Conversations
# ============================================================

class TestStartNewConversation:
    """Tests for the conversation recipe and its rollback."""

    def test_success(self, start_conversation, conversations, messages, dispatcher):
        """Test creating a conversation with its first message."""
        outcome = run(start_conversation, initial_state(user_id=1, initial_message_text="hello"))

        assert outcome.ok
        conversation = outcome.value["conversation"]
        message = outcome.value["initial_message"]

        assert conversations.get(conversation["conversation_id"]) is not None
        assert message["conversation_id"] == conversation["conversation_id"]
        assert message["text"] == "hello"
        assert len(messages) == 1
        assert [e["topic"] for e in dispatcher.events] == [
            "conversation-created",
            "message-created",
        ]

    def test_empty_text(self, start_conversation, conversations):
        """Test that validation fails before anything is written."""
        outcome = run(start_conversation, initial_state(user_id=1, initial_message_text="  "))

        assert outcome.failed_step == "validate"
        assert outcome.value == {
            "step": "validate",
            "error": {"error": "empty_message_text"},
            "rolled_back": False,
        }
        assert len(conversations) == 0

    def test_missing_user(self, start_conversation):
        outcome = run(start_conversation, initial_state(initial_message_text="hello"))
        assert outcome.value["error"] == {"error": "missing_user_id"}

    def test_rollback_on_message_failure(self, start_conversation, conversations, messages, dispatcher):
        """Test that the conversation is deleted when the message is rejected."""
        outcome = run(
            start_conversation,
            initial_state(user_id=1, initial_message_text="x" * 50),
        )

        assert outcome.failed_step == "create_initial_message"
        assert outcome.value["error"] == {"error": "message_too_long"}
        assert outcome.value["rolled_back"] is True
        assert outcome.value["rollback_correlation_id"] != outcome.correlation_id
        assert len(conversations) == 0
        assert len(messages) == 0
        assert dispatcher.events == []

    def test_rollback_telemetry(self, start_conversation):
        """Test that the rollback run reports to the same observer under its own id."""
        recorder = RecordingTelemetry()
        outcome = run(
            start_conversation,
            initial_state(user_id=1, initial_message_text="x" * 50),
            {"enable_telemetry": True, "telemetry": recorder},
        )

        assert recorder.kinds == [
            "start", "success", "success", "error",
            "start", "success", "finish",
        ]
        assert recorder.events[3].step == "create_initial_message"

        outer_events, rollback_events = recorder.events[:4], recorder.events[4:]
        rollback_id = outcome.value["rollback_correlation_id"]
        assert all(e.correlation_id == outcome.correlation_id for e in outer_events)
        assert all(e.correlation_id == rollback_id for e in rollback_events)
        assert rollback_events[1].step == "delete_conversation"

    def test_rollback_gets_own_correlation_id(self, start_conversation):
        """Test that an explicit id on the outer run is not reused by the rollback."""
        outcome = run(
            start_conversation,
            initial_state(user_id=1, initial_message_text="x" * 50),
            {"correlation_id": "parent"},
        )

        assert outcome.correlation_id == "parent"
        assert outcome.value["rolled_back"] is True
        assert outcome.value["rollback_correlation_id"] != "parent"


class TestDeleteConversation:
    """Tests for the delete recipe."""

    def test_delete(self, conversations):
        conversation = conversations.create(1)
        outcome = run(
            DeleteConversation(conversations),
            initial_state(conversation=conversation.to_dict()),
        )

        assert outcome.value == {"deleted": True}
        assert len(conversations) == 0

    def test_no_conversation(self, conversations):
        outcome = run(DeleteConversation(conversations), initial_state())
        assert outcome.value == {"deleted": False, "error": {"error": "no_conversation"}}

    def test_unknown_conversation(self, conversations):
        outcome = run(
            DeleteConversation(conversations),
            initial_state(conversation={"conversation_id": "missing"}),
        )
        assert outcome.value == {"deleted": False, "error": {"error": "conversation_not_found"}}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
