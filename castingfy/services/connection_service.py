"""
Connection (networking request) service.

A pair of users has at most one connection row. The existence check and
the insert run in one transaction holding an advisory lock on the
unordered pair, so simultaneous requests from both sides cannot both
insert.
"""

from dataclasses import dataclass

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError, lock_pair
from castingfy.db.pool import get_db_transaction
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.network_domain import RESPONSE_STATUSES, Connection
from castingfy.models.domain.user_domain import UserSummary
from castingfy.repositories.network_repository import ConnectionRepository
from castingfy.repositories.user_repository import ProfileRepository
from castingfy.services.errors import ConflictError, NotFoundError, ValidationError

logger = get_logger(__name__)

LOCK_NAMESPACE = "connection"
CONNECTION_STATUSES = ("pending", "accepted", "rejected")


@dataclass
class ConnectionView:
    connection: Connection
    is_incoming: bool
    other_user: UserSummary


async def list_connections(ctx: AuthContext, status: str | None = None) -> list[ConnectionView]:
    if status is not None and status not in CONNECTION_STATUSES:
        raise ValidationError(f"Invalid status: {status}", user_id=ctx.user_id)

    connections = await ConnectionRepository.list_for_user(ctx.user_id, status)
    views = []
    for connection in connections:
        other_id = connection.other_participant(ctx.user_id)
        views.append(
            ConnectionView(
                connection=connection,
                is_incoming=connection.is_incoming_for(ctx.user_id),
                other_user=await ProfileRepository.get_summary(other_id),
            )
        )
    return views


async def request_connection(ctx: AuthContext, other_user_id: str | None) -> Connection:
    """
    Send a connection request from the caller to `other_user_id`.

    Raises:
        ValidationError: missing target or a request to oneself
        ConflictError: a connection already exists in either direction
        NotFoundError: the target user does not exist
    """
    if not other_user_id:
        raise ValidationError("connectedUserId is required", user_id=ctx.user_id)
    if other_user_id == ctx.user_id:
        raise ValidationError("You cannot connect with yourself", user_id=ctx.user_id)

    try:
        async with await get_db_transaction() as conn:
            await lock_pair(conn, LOCK_NAMESPACE, ctx.user_id, other_user_id)
            existing = await ConnectionRepository.find_between(
                ctx.user_id, other_user_id, connection=conn
            )
            if existing:
                raise ConflictError("Connection already exists", user_id=ctx.user_id)
            return await ConnectionRepository.insert(ctx.user_id, other_user_id, connection=conn)
    except DatabaseError as e:
        if e.is_foreign_key_violation:
            raise NotFoundError("User not found", user_id=ctx.user_id) from e
        raise


async def respond_to_connection(
    ctx: AuthContext, connection_id: str | None, status: str | None
) -> Connection:
    """
    Accept or reject a pending request addressed to the caller.

    Raises:
        ValidationError: missing id or a status other than accepted/rejected
        NotFoundError: no pending request with that id for the caller
    """
    if not connection_id or status not in RESPONSE_STATUSES:
        raise ValidationError("connectionId and valid status are required", user_id=ctx.user_id)

    connection = await ConnectionRepository.respond(connection_id, ctx.user_id, status)
    if not connection:
        raise NotFoundError("Connection request not found", user_id=ctx.user_id)
    return connection


async def delete_connection(ctx: AuthContext, connection_id: str | None) -> None:
    if not connection_id:
        raise ValidationError("connectionId is required", user_id=ctx.user_id)
    if not await ConnectionRepository.delete(connection_id, ctx.user_id):
        raise NotFoundError("Connection not found", user_id=ctx.user_id)
    logger.info("Connection deleted", user_id=ctx.user_id, connection_id=connection_id)
