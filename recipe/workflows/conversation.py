"""
Conversation Recipes.

``StartNewConversation`` writes to two independent stores: it creates a
conversation, then the initial message. If the message store rejects the
message, ``handle_error`` runs the ``DeleteConversation`` recipe to remove
the conversation again, so callers never see half of the change.

Flow:
    validate -> create_conversation -> create_initial_message -> broadcast
                                              |
                                              └─ fails -> DeleteConversation
"""

from typing import Any, Dict, Optional
import logging

from recipe.engine.definition import Recipe
from recipe.engine.executor import run
from recipe.engine.state import WorkflowState
from recipe.registry import register_recipe
from recipe.workflows.stores import (
    ConversationStore,
    MessageStore,
    Outbox,
    StoreError,
    conversation_store,
    message_store,
    outbox,
)


logger = logging.getLogger(__name__)


@register_recipe("delete_conversation", description="Delete a conversation")
class DeleteConversation(Recipe):
    """Delete the conversation stored under ``conversation``."""

    name = "DeleteConversation"
    steps = ["delete_conversation"]

    def __init__(self, conversations: Optional[ConversationStore] = None):
        self.conversations = conversations if conversations is not None else conversation_store

    def delete_conversation(self, state: WorkflowState):
        conversation = state.get("conversation")
        if conversation is None:
            return {"error": "no_conversation"}
        try:
            self.conversations.delete(conversation["conversation_id"])
        except StoreError as e:
            return {"error": e.reason}
        return state.unassign("conversation")

    def handle_result(self, state: WorkflowState) -> Any:
        return {"deleted": True}

    def handle_error(self, step: str, error: Any, state: WorkflowState) -> Any:
        return {"deleted": False, "error": error}


@register_recipe(
    "start_conversation",
    description="Create a conversation with an initial message, rolling back on failure",
)
class StartNewConversation(Recipe):
    """Create a conversation with an initial message."""

    name = "StartNewConversation"
    steps = [
        "validate",
        "create_conversation",
        "create_initial_message",
        "broadcast_new_conversation",
    ]

    def __init__(
        self,
        conversations: Optional[ConversationStore] = None,
        messages: Optional[MessageStore] = None,
        dispatcher: Optional[Outbox] = None,
    ):
        self.conversations = conversations if conversations is not None else conversation_store
        self.messages = messages if messages is not None else message_store
        self.dispatcher = dispatcher if dispatcher is not None else outbox

    # Steps

    def validate(self, state: WorkflowState):
        text = state.get("initial_message_text")
        if not isinstance(text, str) or not text.strip():
            return {"error": "empty_message_text"}
        if state.get("user_id") is None:
            return {"error": "missing_user_id"}
        return state

    def create_conversation(self, state: WorkflowState):
        conversation = self.conversations.create(state.get("user_id"))
        return state.assign("conversation", conversation.to_dict())

    def create_initial_message(self, state: WorkflowState):
        conversation = state.get("conversation")
        try:
            message = self.messages.create(
                state.get("user_id"),
                conversation["conversation_id"],
                state.get("initial_message_text"),
            )
        except StoreError as e:
            return {"error": e.reason}
        return state.assign("initial_message", message.to_dict())

    def broadcast_new_conversation(self, state: WorkflowState):
        self.dispatcher.broadcast("conversation-created", state.get("conversation"))
        self.dispatcher.broadcast("message-created", state.get("initial_message"))
        return ("ok", state)

    # Terminal handlers

    def handle_result(self, state: WorkflowState) -> Dict[str, Any]:
        return {
            "conversation": state.get("conversation"),
            "initial_message": state.get("initial_message"),
        }

    def handle_error(self, step: str, error: Any, state: WorkflowState) -> Dict[str, Any]:
        if step != "create_initial_message":
            return {"step": step, "error": error, "rolled_back": False}

        logger.info(
            f"Rolling back conversation {state.get('conversation')['conversation_id']} "
            f"(correlation_id={state.correlation_id})"
        )
        rollback_state = state.assign("parent_correlation_id", state.correlation_id)
        rollback = run(DeleteConversation(self.conversations), rollback_state)
        return {
            "step": step,
            "error": error,
            "rolled_back": rollback.ok,
            "rollback_correlation_id": rollback.correlation_id,
        }
