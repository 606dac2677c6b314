"""
Persistence for conversations and messages.

Conversations store their participants ordered (user1_id < user2_id) so a
pair maps to exactly one row whichever side starts the chat.
"""

from datetime import datetime

import psycopg

from castingfy.db.helpers import execute_query, fetch_all, fetch_one, with_db_retry
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.chat_domain import Conversation, ConversationDigest, Message
from castingfy.repositories.base import RepositoryError, clean_row, row_to, rows_to

logger = get_logger(__name__)


class ChatRepository:
    CONVERSATION_COLUMNS = "id, user1_id, user2_id, created_at, updated_at"
    MESSAGE_COLUMNS = "id, conversation_id, sender_id, content, is_read, created_at"

    @classmethod
    @with_db_retry()
    async def get_conversation(cls, conversation_id: str) -> Conversation | None:
        query = f"SELECT {cls.CONVERSATION_COLUMNS} FROM conversations WHERE id = %s"
        return row_to(Conversation, await fetch_one(query, (conversation_id,)))

    @classmethod
    async def find_conversation(
        cls, user1_id: str, user2_id: str, *, connection: psycopg.AsyncConnection | None = None
    ) -> Conversation | None:
        query = f"""
            SELECT {cls.CONVERSATION_COLUMNS}
            FROM conversations
            WHERE user1_id = %s AND user2_id = %s
        """
        row = await fetch_one(query, (user1_id, user2_id), connection=connection)
        return row_to(Conversation, row)

    @classmethod
    async def insert_conversation(
        cls, user1_id: str, user2_id: str, *, connection: psycopg.AsyncConnection | None = None
    ) -> Conversation:
        query = f"""
            INSERT INTO conversations (user1_id, user2_id)
            VALUES (%s, %s)
            RETURNING {cls.CONVERSATION_COLUMNS}
        """
        row = await fetch_one(query, (user1_id, user2_id), connection=connection)
        if not row:
            raise RepositoryError("Failed to create conversation", operation="insert_conversation")

        logger.info("Conversation created", conversation_id=str(row["id"]))
        return row_to(Conversation, row)

    @classmethod
    @with_db_retry()
    async def list_digests(cls, user_id: str) -> list[ConversationDigest]:
        """
        Inbox of a user: every conversation with its latest message and the
        number of unread messages sent by the other participant.
        """
        query = """
            SELECT c.id, c.user1_id, c.user2_id, c.created_at, c.updated_at,
                   last.id AS last_id, last.sender_id AS last_sender_id,
                   last.content AS last_content, last.is_read AS last_is_read,
                   last.created_at AS last_created_at,
                   (
                       SELECT COUNT(*)
                       FROM messages u
                       WHERE u.conversation_id = c.id
                         AND u.is_read = false
                         AND u.sender_id <> %s
                   ) AS unread_count
            FROM conversations c
            LEFT JOIN LATERAL (
                SELECT m.id, m.sender_id, m.content, m.is_read, m.created_at
                FROM messages m
                WHERE m.conversation_id = c.id
                ORDER BY m.created_at DESC
                LIMIT 1
            ) last ON true
            WHERE c.user1_id = %s OR c.user2_id = %s
            ORDER BY c.updated_at DESC
        """
        rows = await fetch_all(query, (user_id, user_id, user_id))

        digests = []
        for row in rows:
            row = clean_row(row)
            last_message = None
            if row["last_id"]:
                last_message = Message(
                    id=row["last_id"],
                    conversation_id=row["id"],
                    sender_id=row["last_sender_id"],
                    content=row["last_content"],
                    is_read=row["last_is_read"],
                    created_at=row["last_created_at"],
                )
            digests.append(
                ConversationDigest(
                    conversation=Conversation.model_validate(row),
                    last_message=last_message,
                    unread_count=row["unread_count"] or 0,
                )
            )
        return digests

    @classmethod
    @with_db_retry()
    async def list_messages(
        cls, conversation_id: str, since: datetime | None = None
    ) -> list[Message]:
        """Messages oldest first; with `since`, only the newer ones."""
        query = f"""
            SELECT {cls.MESSAGE_COLUMNS}
            FROM messages
            WHERE conversation_id = %s
              AND (%s::timestamptz IS NULL OR created_at > %s)
            ORDER BY created_at ASC
        """
        rows = await fetch_all(query, (conversation_id, since, since))
        return rows_to(Message, rows)

    @classmethod
    async def mark_read(cls, conversation_id: str, reader_id: str) -> int:
        """Flag every unread message the other participant sent as read."""
        return await execute_query(
            """
            UPDATE messages
            SET is_read = true
            WHERE conversation_id = %s AND sender_id <> %s AND is_read = false
            """,
            (conversation_id, reader_id),
        )

    @classmethod
    async def insert_message(cls, conversation_id: str, sender_id: str, content: str) -> Message:
        query = f"""
            INSERT INTO messages (conversation_id, sender_id, content, is_read)
            VALUES (%s, %s, %s, false)
            RETURNING {cls.MESSAGE_COLUMNS}
        """
        row = await fetch_one(query, (conversation_id, sender_id, content))
        if not row:
            raise RepositoryError("Failed to send message", operation="insert_message")

        await execute_query(
            "UPDATE conversations SET updated_at = NOW() WHERE id = %s", (conversation_id,)
        )
        return row_to(Message, row)
