from datetime import datetime

from pydantic import BaseModel


def normalize_pair(a: str, b: str) -> tuple[str, str]:
    """Order two participant ids so user1_id < user2_id (lexically)."""
    first, second = sorted((str(a), str(b)))
    return first, second


class Conversation(BaseModel):
    id: str
    user1_id: str
    user2_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)

    def other_participant(self, user_id: str) -> str:
        return self.user2_id if self.user1_id == user_id else self.user1_id


class Message(BaseModel):
    id: str
    conversation_id: str | None = None
    sender_id: str
    content: str
    is_read: bool = False
    created_at: datetime | None = None


class ConversationDigest(BaseModel):
    """A conversation as listed in the inbox of one participant."""

    conversation: Conversation
    last_message: Message | None = None
    unread_count: int = 0
