"""
Messaging service.

Conversations are keyed by the ordered participant pair. Delivery is pull
based: clients poll list_messages, passing `since` to fetch only what
arrived after the newest message they hold.
"""

from dataclasses import dataclass
from datetime import datetime

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError, lock_pair
from castingfy.db.pool import get_db_transaction
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.chat_domain import (
    Conversation,
    ConversationDigest,
    Message,
    normalize_pair,
)
from castingfy.models.domain.user_domain import UserSummary
from castingfy.repositories.chat_repository import ChatRepository
from castingfy.repositories.user_repository import ProfileRepository
from castingfy.services.errors import NotFoundError, PermissionDeniedError, ValidationError

logger = get_logger(__name__)

LOCK_NAMESPACE = "conversation"


@dataclass
class ConversationView:
    digest: ConversationDigest
    other_user: UserSummary


async def get_or_create_conversation(ctx: AuthContext, other_user_id: str | None) -> Conversation:
    """
    The conversation between the caller and `other_user_id`, created on first use.

    Idempotent for either ordering of the pair; concurrent first messages
    from both sides serialize on an advisory lock for the pair.
    """
    if not other_user_id:
        raise ValidationError("otherUserId is required", user_id=ctx.user_id)
    if other_user_id == ctx.user_id:
        raise ValidationError("You cannot start a conversation with yourself", user_id=ctx.user_id)

    user1_id, user2_id = normalize_pair(ctx.user_id, other_user_id)

    existing = await ChatRepository.find_conversation(user1_id, user2_id)
    if existing:
        return existing

    try:
        async with await get_db_transaction() as conn:
            await lock_pair(conn, LOCK_NAMESPACE, user1_id, user2_id)
            existing = await ChatRepository.find_conversation(user1_id, user2_id, connection=conn)
            if existing:
                return existing
            return await ChatRepository.insert_conversation(user1_id, user2_id, connection=conn)
    except DatabaseError as e:
        if e.is_foreign_key_violation:
            raise NotFoundError("User not found", user_id=ctx.user_id) from e
        raise


async def list_conversations(ctx: AuthContext) -> list[ConversationView]:
    digests = await ChatRepository.list_digests(ctx.user_id)
    views = []
    for digest in digests:
        other_id = digest.conversation.other_participant(ctx.user_id)
        views.append(
            ConversationView(digest=digest, other_user=await ProfileRepository.get_summary(other_id))
        )
    return views


async def _require_participant(ctx: AuthContext, conversation_id: str | None) -> Conversation:
    if not conversation_id:
        raise ValidationError("conversationId is required", user_id=ctx.user_id)

    conversation = await ChatRepository.get_conversation(conversation_id)
    if not conversation or not conversation.has_participant(ctx.user_id):
        raise PermissionDeniedError("Forbidden", user_id=ctx.user_id)
    return conversation


async def list_messages(
    ctx: AuthContext, conversation_id: str | None, since: datetime | None = None
) -> list[Message]:
    """
    Messages of a conversation, oldest first, marking the other side's as read.

    Raises:
        PermissionDeniedError: the caller is not a participant
    """
    conversation = await _require_participant(ctx, conversation_id)

    messages = await ChatRepository.list_messages(conversation.id, since)
    marked = await ChatRepository.mark_read(conversation.id, ctx.user_id)
    if marked:
        logger.debug("Messages marked read", user_id=ctx.user_id, conversation_id=conversation.id, count=marked)
    return messages


async def send_message(ctx: AuthContext, conversation_id: str | None, content: str | None) -> Message:
    """
    Append a message; the conversation moves to the top of both inboxes.

    Raises:
        ValidationError: empty content or missing conversation
        PermissionDeniedError: the caller is not a participant
    """
    text = (content or "").strip()
    if not conversation_id or not text:
        raise ValidationError("conversationId and content are required", user_id=ctx.user_id)

    conversation = await _require_participant(ctx, conversation_id)
    message = await ChatRepository.insert_message(conversation.id, ctx.user_id, text)

    logger.info("Message sent", user_id=ctx.user_id, conversation_id=conversation.id)
    return message
