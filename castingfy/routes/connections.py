"""
connections.py
--------------
Purpose:
    Networking requests between users.

Usage:
    1. GET /connections?status= - the caller's connections
    2. POST /connections - send a request ({connectedUserId})
    3. PATCH /connections - accept/reject ({connectionId, status}); recipient only
    4. DELETE /connections?connectionId= - remove; either participant
"""

from fastapi import APIRouter, Depends, Query

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.models.api.network_models import (
    ConnectionCreateRequest,
    ConnectionEntry,
    ConnectionListResponse,
    ConnectionRespondRequest,
    ConnectionResponse,
    SuccessResponse,
)
from castingfy.models.api.user_response import OtherUser
from castingfy.services import connection_service

router = APIRouter(prefix="/connections", tags=["connections"])


@router.get("", response_model=ConnectionListResponse)
async def list_connections(
    status: str | None = None, ctx: AuthContext = Depends(get_auth_context)
):
    views = await connection_service.list_connections(ctx, status or None)
    return ConnectionListResponse(
        connections=[
            ConnectionEntry(
                id=view.connection.id,
                status=view.connection.status,
                created_at=view.connection.created_at,
                updated_at=view.connection.updated_at,
                is_incoming=view.is_incoming,
                other_user=OtherUser(**view.other_user.model_dump()),
            )
            for view in views
        ]
    )


@router.post("", response_model=ConnectionResponse, status_code=201)
async def request_connection(
    request: ConnectionCreateRequest, ctx: AuthContext = Depends(get_auth_context)
):
    """
    Raises:
        400: missing target or self
        409: a connection already exists in either direction
    """
    connection = await connection_service.request_connection(ctx, request.connected_user_id)
    return ConnectionResponse(connection=connection)


@router.patch("", response_model=ConnectionResponse)
async def respond_to_connection(
    request: ConnectionRespondRequest, ctx: AuthContext = Depends(get_auth_context)
):
    connection = await connection_service.respond_to_connection(
        ctx, request.connection_id, request.status
    )
    return ConnectionResponse(connection=connection)


@router.delete("", response_model=SuccessResponse)
async def delete_connection(
    connection_id: str | None = Query(default=None, alias="connectionId"),
    ctx: AuthContext = Depends(get_auth_context),
):
    await connection_service.delete_connection(ctx, connection_id)
    return SuccessResponse()
