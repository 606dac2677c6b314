# castingfy/models/api/chat_models.py
"""Request and response bodies for conversations and messages."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from castingfy.models.api.user_response import OtherUser
from castingfy.models.domain.chat_domain import Message


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConversationCreateRequest(_Camel):
    other_user_id: str | None = None


class ConversationIdResponse(_Camel):
    conversation_id: str


class LastMessage(BaseModel):
    content: str
    created_at: datetime | None = None
    sender_id: str


class ConversationEntry(_Camel):
    id: str
    other_user: OtherUser
    last_message: LastMessage | None = None
    unread_count: int = 0
    updated_at: datetime | None = None


class ConversationListResponse(BaseModel):
    conversations: list[ConversationEntry]


class MessageSendRequest(_Camel):
    conversation_id: str | None = None
    content: str | None = None


class MessageListResponse(BaseModel):
    messages: list[Message]


class MessageResponse(BaseModel):
    message: Message
