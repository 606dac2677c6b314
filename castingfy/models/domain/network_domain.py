from datetime import datetime
from typing import Literal

from pydantic import BaseModel

ConnectionStatus = Literal["pending", "accepted", "rejected"]
RESPONSE_STATUSES: tuple[str, ...] = ("accepted", "rejected")


class Connection(BaseModel):
    """Undirected networking relationship; user_id is the requester."""

    id: str
    user_id: str
    connected_user_id: str
    status: ConnectionStatus = "pending"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def other_participant(self, user_id: str) -> str:
        return self.connected_user_id if self.user_id == user_id else self.user_id

    def is_incoming_for(self, user_id: str) -> bool:
        return self.connected_user_id == user_id


class Favorite(BaseModel):
    id: str
    user_id: str
    favorited_user_id: str
    created_at: datetime | None = None
