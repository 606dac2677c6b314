# castingfy/models/api/network_models.py
"""Request and response bodies for connections and favorites."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from castingfy.models.api.user_response import OtherUser
from castingfy.models.domain.network_domain import Connection, ConnectionStatus, Favorite


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConnectionCreateRequest(_Camel):
    connected_user_id: str | None = None


class ConnectionRespondRequest(_Camel):
    connection_id: str | None = None
    status: str | None = None


class ConnectionEntry(_Camel):
    id: str
    status: ConnectionStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_incoming: bool
    other_user: OtherUser


class ConnectionListResponse(BaseModel):
    connections: list[ConnectionEntry]


class ConnectionResponse(BaseModel):
    connection: Connection


class FavoriteCreateRequest(_Camel):
    favorited_user_id: str | None = None


class FavoriteIdsResponse(BaseModel):
    favorites: list[str]


class FavoriteResponse(BaseModel):
    favorite: Favorite


class SuccessResponse(BaseModel):
    success: bool = True
