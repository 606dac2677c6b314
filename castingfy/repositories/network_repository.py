"""
Persistence for the social graph: connections and favorites.

A connection row is directed only in the sense that user_id sent the
request; lookups treat the pair as unordered.
"""

import psycopg

from castingfy.db.helpers import execute_query, fetch_all, fetch_one, with_db_retry
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.network_domain import Connection, Favorite
from castingfy.repositories.base import RepositoryError, row_to, rows_to

logger = get_logger(__name__)


class ConnectionRepository:
    SELECT_COLUMNS = "id, user_id, connected_user_id, status, created_at, updated_at"

    @classmethod
    @with_db_retry()
    async def list_for_user(cls, user_id: str, status: str | None = None) -> list[Connection]:
        """Connections the user takes part in, most recently updated first."""
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM connections
            WHERE (user_id = %s OR connected_user_id = %s)
              AND (%s::text IS NULL OR status = %s)
            ORDER BY updated_at DESC
        """
        rows = await fetch_all(query, (user_id, user_id, status, status))
        return rows_to(Connection, rows)

    @classmethod
    async def find_between(
        cls, a: str, b: str, *, connection: psycopg.AsyncConnection | None = None
    ) -> Connection | None:
        """Any row for the pair, in either direction."""
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM connections
            WHERE (user_id = %s AND connected_user_id = %s)
               OR (user_id = %s AND connected_user_id = %s)
            LIMIT 1
        """
        row = await fetch_one(query, (a, b, b, a), connection=connection)
        return row_to(Connection, row)

    @classmethod
    @with_db_retry()
    async def statuses_for(cls, user_id: str) -> dict[str, str]:
        """Map of other-user id -> connection status for every row of the user."""
        rows = await fetch_all(
            """
            SELECT user_id, connected_user_id, status
            FROM connections
            WHERE user_id = %s OR connected_user_id = %s
            """,
            (user_id, user_id),
        )
        statuses = {}
        for row in rows:
            requester, recipient = str(row["user_id"]), str(row["connected_user_id"])
            other = recipient if requester == user_id else requester
            statuses[other] = row["status"]
        return statuses

    @classmethod
    async def insert(
        cls, requester_id: str, recipient_id: str, *, connection: psycopg.AsyncConnection | None = None
    ) -> Connection:
        query = f"""
            INSERT INTO connections (user_id, connected_user_id, status)
            VALUES (%s, %s, 'pending')
            RETURNING {cls.SELECT_COLUMNS}
        """
        row = await fetch_one(query, (requester_id, recipient_id), connection=connection)
        if not row:
            raise RepositoryError("Failed to create connection", operation="insert_connection")

        logger.info("Connection requested", user_id=requester_id, recipient_id=recipient_id)
        return row_to(Connection, row)

    @classmethod
    async def respond(cls, connection_id: str, recipient_id: str, status: str) -> Connection | None:
        """Move a pending request addressed to recipient_id to `status`."""
        query = f"""
            UPDATE connections
            SET status = %s, updated_at = NOW()
            WHERE id = %s AND connected_user_id = %s AND status = 'pending'
            RETURNING {cls.SELECT_COLUMNS}
        """
        row = await fetch_one(query, (status, connection_id, recipient_id))
        if row:
            logger.info(
                "Connection answered", user_id=recipient_id, connection_id=connection_id, status=status
            )
        return row_to(Connection, row)

    @classmethod
    async def delete(cls, connection_id: str, user_id: str) -> bool:
        deleted = await execute_query(
            """
            DELETE FROM connections
            WHERE id = %s AND (user_id = %s OR connected_user_id = %s)
            """,
            (connection_id, user_id, user_id),
        )
        return deleted > 0


class FavoriteRepository:
    SELECT_COLUMNS = "id, user_id, favorited_user_id, created_at"

    @classmethod
    @with_db_retry()
    async def list_for_user(cls, user_id: str) -> list[Favorite]:
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM favorites
            WHERE user_id = %s
            ORDER BY created_at DESC
        """
        return rows_to(Favorite, await fetch_all(query, (user_id,)))

    @classmethod
    async def insert(cls, user_id: str, favorited_user_id: str) -> Favorite:
        """
        Raises:
            DatabaseError: sqlstate 23505 when the favorite already exists
        """
        query = f"""
            INSERT INTO favorites (user_id, favorited_user_id)
            VALUES (%s, %s)
            RETURNING {cls.SELECT_COLUMNS}
        """
        row = await fetch_one(query, (user_id, favorited_user_id))
        if not row:
            raise RepositoryError("Failed to add favorite", operation="insert_favorite")
        return row_to(Favorite, row)

    @classmethod
    async def delete(cls, user_id: str, favorited_user_id: str) -> bool:
        deleted = await execute_query(
            "DELETE FROM favorites WHERE user_id = %s AND favorited_user_id = %s",
            (user_id, favorited_user_id),
        )
        return deleted > 0
