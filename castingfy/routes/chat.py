"""
chat.py
-------
Purpose:
    Direct messages between two users.

Notes:
    - Clients poll GET /chat/messages; passing `since` (timestamp of the
      newest message held) returns only what arrived after it.
    - Reading a thread marks the other participant's messages as read.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.models.api.chat_models import (
    ConversationCreateRequest,
    ConversationEntry,
    ConversationIdResponse,
    ConversationListResponse,
    LastMessage,
    MessageListResponse,
    MessageResponse,
    MessageSendRequest,
)
from castingfy.models.api.user_response import OtherUser
from castingfy.services import chat_service

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(ctx: AuthContext = Depends(get_auth_context)):
    views = await chat_service.list_conversations(ctx)

    entries = []
    for view in views:
        last = view.digest.last_message
        entries.append(
            ConversationEntry(
                id=view.digest.conversation.id,
                other_user=OtherUser(**view.other_user.model_dump()),
                last_message=(
                    LastMessage(content=last.content, created_at=last.created_at, sender_id=last.sender_id)
                    if last
                    else None
                ),
                unread_count=view.digest.unread_count,
                updated_at=view.digest.conversation.updated_at,
            )
        )
    return ConversationListResponse(conversations=entries)


@router.post("/conversations", response_model=ConversationIdResponse)
async def open_conversation(
    request: ConversationCreateRequest, ctx: AuthContext = Depends(get_auth_context)
):
    """Same id for (A, B) and (B, A); created on first call."""
    conversation = await chat_service.get_or_create_conversation(ctx, request.other_user_id)
    return ConversationIdResponse(conversation_id=conversation.id)


@router.get("/messages", response_model=MessageListResponse)
async def list_messages(
    conversation_id: str | None = Query(default=None, alias="conversationId"),
    since: datetime | None = None,
    ctx: AuthContext = Depends(get_auth_context),
):
    """
    Raises:
        400: missing conversationId
        403: caller is not a participant
    """
    messages = await chat_service.list_messages(ctx, conversation_id, since)
    return MessageListResponse(messages=messages)


@router.post("/messages", response_model=MessageResponse, status_code=201)
async def send_message(request: MessageSendRequest, ctx: AuthContext = Depends(get_auth_context)):
    message = await chat_service.send_message(ctx, request.conversation_id, request.content)
    return MessageResponse(message=message)
