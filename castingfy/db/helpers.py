# castingfy/db/helpers.py
"""
Query helpers for the repository layer.

Every helper borrows a pooled connection unless one is passed in, which
is how repositories join a transaction opened by a service. psycopg
errors come out as DatabaseError carrying the SQLSTATE.
"""

import asyncio
import functools
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import psycopg
from psycopg.types.json import Jsonb

from castingfy.db.pool import get_db_connection
from castingfy.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class DatabaseError(Exception):
    """A failed query; `recoverable` marks connection-level failures worth retrying."""

    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        recoverable: bool = True,
        sqlstate: str | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.recoverable = recoverable
        self.sqlstate = sqlstate

    @property
    def is_unique_violation(self) -> bool:
        return self.sqlstate == UNIQUE_VIOLATION

    @property
    def is_foreign_key_violation(self) -> bool:
        return self.sqlstate == FOREIGN_KEY_VIOLATION


def _wrap(e: psycopg.Error, operation: str, query: Any) -> DatabaseError:
    logger.error(
        "Database error",
        operation=operation,
        query=str(query)[:100],
        error=str(e),
        sqlstate=e.sqlstate,
    )
    return DatabaseError(
        f"Query failed: {e}",
        operation=operation,
        recoverable=isinstance(e, psycopg.OperationalError),
        sqlstate=e.sqlstate,
    )


@asynccontextmanager
async def _borrow(
    connection: psycopg.AsyncConnection | None,
) -> AsyncGenerator[psycopg.AsyncConnection, None]:
    if connection is not None:
        yield connection
        return
    async with await get_db_connection() as conn:
        yield conn


async def fetch_one(
    query: Any, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> dict[str, Any] | None:
    """
    Execute query and return single row as dict.

    Args:
        query: SQL string with %s placeholders or a psycopg.sql composition
        params: Query parameters
        connection: Existing connection, e.g. inside a transaction

    Returns:
        Dict with row data or None if no results
    """
    try:
        async with _borrow(connection) as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                return await cur.fetchone()
    except psycopg.Error as e:
        raise _wrap(e, "fetch_one", query) from e


async def fetch_all(
    query: Any, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> list[dict[str, Any]]:
    """Execute query and return all rows as dicts."""
    try:
        async with _borrow(connection) as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                return await cur.fetchall()
    except psycopg.Error as e:
        raise _wrap(e, "fetch_all", query) from e


async def execute_query(
    query: Any, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> int:
    """Execute a statement and return the number of affected rows."""
    try:
        async with _borrow(connection) as conn:
            cursor = await conn.execute(query, params)
            return cursor.rowcount
    except psycopg.Error as e:
        raise _wrap(e, "execute", query) from e


async def lock_pair(connection: psycopg.AsyncConnection, namespace: str, a: str, b: str) -> None:
    """
    Take a transaction-scoped advisory lock for an unordered pair of ids.

    Serializes check-then-insert sequences on the same pair (connections,
    conversations) so concurrent requests from both sides see each other.
    Must be called on a connection that is inside a transaction.
    """
    first, second = sorted((str(a), str(b)))
    key = f"{namespace}:{first}:{second}"
    try:
        await connection.execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (key,))
    except psycopg.Error as e:
        raise _wrap(e, "lock_pair", key) from e


def as_json(value: Any) -> Jsonb:
    """Adapt a python structure for a JSONB column."""
    return Jsonb(value)


def with_db_retry(max_retries: int = 3, base_delay: float = 0.1):
    """
    Decorator to retry database operations on temporary failures.

    Only recoverable DatabaseErrors (connection/operational problems) are
    retried; integrity and data errors propagate immediately.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Base delay between retries (exponential backoff)
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)

                except DatabaseError as e:
                    if not e.recoverable or attempt >= max_retries:
                        raise
                    delay = base_delay * (2**attempt)
                    logger.warning(
                        "Database operation failed, retrying",
                        operation=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay=delay,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
