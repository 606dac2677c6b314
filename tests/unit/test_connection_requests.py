from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError
from castingfy.models.domain.network_domain import Connection
from castingfy.services import connection_service
from castingfy.services.errors import ConflictError, NotFoundError, ValidationError

CTX = AuthContext(user_id="user-a", email="a@example.com")


def _connection(**overrides) -> Connection:
    data = {
        "id": "conn-1",
        "user_id": "user-a",
        "connected_user_id": "user-b",
        "status": "pending",
        "created_at": datetime(2024, 5, 1, tzinfo=UTC),
        "updated_at": datetime(2024, 5, 1, tzinfo=UTC),
    }
    data.update(overrides)
    return Connection(**data)


@pytest.fixture
def patched(monkeypatch, fake_transaction):
    mocks = {
        "lock_pair": AsyncMock(),
        "find_between": AsyncMock(return_value=None),
        "insert": AsyncMock(return_value=_connection()),
    }
    monkeypatch.setattr(
        "castingfy.services.connection_service.get_db_transaction",
        AsyncMock(return_value=fake_transaction),
    )
    monkeypatch.setattr("castingfy.services.connection_service.lock_pair", mocks["lock_pair"])
    monkeypatch.setattr(
        "castingfy.services.connection_service.ConnectionRepository.find_between", mocks["find_between"]
    )
    monkeypatch.setattr(
        "castingfy.services.connection_service.ConnectionRepository.insert", mocks["insert"]
    )
    return mocks


@pytest.mark.asyncio
async def test_request_inserts_under_pair_lock(patched, fake_transaction):
    connection = await connection_service.request_connection(CTX, "user-b")

    assert connection.status == "pending"
    patched["lock_pair"].assert_awaited_once_with(
        fake_transaction.conn, "connection", "user-a", "user-b"
    )
    patched["find_between"].assert_awaited_once_with(
        "user-a", "user-b", connection=fake_transaction.conn
    )
    patched["insert"].assert_awaited_once_with("user-a", "user-b", connection=fake_transaction.conn)


@pytest.mark.asyncio
async def test_request_conflicts_with_reverse_connection(patched):
    patched["find_between"].return_value = _connection(user_id="user-b", connected_user_id="user-a")

    with pytest.raises(ConflictError):
        await connection_service.request_connection(CTX, "user-b")

    patched["insert"].assert_not_awaited()


@pytest.mark.asyncio
async def test_request_to_self_is_rejected(patched):
    with pytest.raises(ValidationError):
        await connection_service.request_connection(CTX, "user-a")

    patched["lock_pair"].assert_not_awaited()


@pytest.mark.asyncio
async def test_request_to_unknown_user_is_not_found(patched):
    patched["insert"].side_effect = DatabaseError(
        "insert or update violates foreign key constraint", sqlstate="23503"
    )

    with pytest.raises(NotFoundError):
        await connection_service.request_connection(CTX, "ghost")


@pytest.mark.asyncio
async def test_respond_requires_accept_or_reject():
    with pytest.raises(ValidationError):
        await connection_service.respond_to_connection(CTX, "conn-1", "pending")


@pytest.mark.asyncio
async def test_respond_to_missing_request_is_not_found(monkeypatch):
    monkeypatch.setattr(
        "castingfy.services.connection_service.ConnectionRepository.respond",
        AsyncMock(return_value=None),
    )

    with pytest.raises(NotFoundError):
        await connection_service.respond_to_connection(CTX, "conn-1", "accepted")


@pytest.mark.asyncio
async def test_list_rejects_unknown_status():
    with pytest.raises(ValidationError):
        await connection_service.list_connections(CTX, "blocked")
