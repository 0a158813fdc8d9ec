"""
In-Memory Stores for the sample recipes.

Two independent stores with no shared transaction, plus an outbox that
records broadcasts. The conversation recipe uses them to show a rollback
across stores.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime
import threading
import uuid


class StoreError(Exception):
    """Raised when a store rejects an operation."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class Conversation:
    conversation_id: str
    user_id: int
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conversation_id": self.conversation_id,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class Message:
    message_id: str
    conversation_id: str
    user_id: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message_id": self.message_id,
            "conversation_id": self.conversation_id,
            "user_id": self.user_id,
            "text": self.text,
        }


class ConversationStore:
    """Thread-safe in-memory storage for conversations."""

    def __init__(self):
        self._conversations: Dict[str, Conversation] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> Conversation:
        with self._lock:
            conversation = Conversation(conversation_id=str(uuid.uuid4()), user_id=user_id)
            self._conversations[conversation.conversation_id] = conversation
            return conversation

    def get(self, conversation_id: str) -> Optional[Conversation]:
        with self._lock:
            return self._conversations.get(conversation_id)

    def delete(self, conversation_id: str) -> None:
        with self._lock:
            if conversation_id not in self._conversations:
                raise StoreError("conversation_not_found")
            del self._conversations[conversation_id]

    def __len__(self) -> int:
        return len(self._conversations)


class MessageStore:
    """
    Thread-safe in-memory storage for messages.

    Rejects messages longer than ``max_length`` characters.
    """

    def __init__(self, max_length: int = 280):
        self.max_length = max_length
        self._messages: Dict[str, Message] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int, conversation_id: str, text: str) -> Message:
        if len(text) > self.max_length:
            raise StoreError("message_too_long")
        with self._lock:
            message = Message(
                message_id=str(uuid.uuid4()),
                conversation_id=conversation_id,
                user_id=user_id,
                text=text,
            )
            self._messages[message.message_id] = message
            return message

    def list_by_conversation(self, conversation_id: str) -> List[Message]:
        with self._lock:
            return [m for m in self._messages.values() if m.conversation_id == conversation_id]

    def __len__(self) -> int:
        return len(self._messages)


class Outbox:
    """Records broadcast events instead of sending them anywhere."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def broadcast(self, topic: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.events.append({"topic": topic, "payload": payload})


# Global store instances
conversation_store = ConversationStore()
message_store = MessageStore()
outbox = Outbox()
