from unittest.mock import AsyncMock

from castingfy.db.helpers import DatabaseError
from castingfy.models.domain.user_domain import TalentProfile, User


def _user(**overrides) -> User:
    data = {"id": "user-123", "email": "ana@example.com", "role": "talent", "status": "verified"}
    data.update(overrides)
    return User(**data)


def test_first_oauth_sync_creates_talent_and_routes_to_profile(client, login, monkeypatch):
    login()
    create = AsyncMock(return_value=_user())
    monkeypatch.setattr("castingfy.services.user_service.UserRepository.get_user", AsyncMock(return_value=None))
    monkeypatch.setattr("castingfy.services.user_service.UserRepository.create_user", create)

    response = client.post("/users/sync")

    assert response.status_code == 200
    body = response.json()
    assert body["created"] is True
    assert body["next"] == "/registro/completar-perfil"
    create.assert_awaited_once_with("user-123", "ana@example.com", role="talent", status="verified")


def test_sync_of_complete_account_goes_to_dashboard(client, login, monkeypatch):
    login()
    profile = TalentProfile(user_id="user-123", stage_name="Ana Ruiz")
    monkeypatch.setattr(
        "castingfy.services.user_service.UserRepository.get_user", AsyncMock(return_value=_user())
    )
    monkeypatch.setattr(
        "castingfy.services.user_service.ProfileRepository.get_profile_for",
        AsyncMock(return_value=profile),
    )

    body = client.post("/users/sync").json()

    assert body["created"] is False
    assert body["next"] == "/dashboard"


def test_register_twice_is_a_conflict(client, login, monkeypatch):
    login()
    monkeypatch.setattr(
        "castingfy.services.user_service.UserRepository.create_user",
        AsyncMock(side_effect=DatabaseError("duplicate key", sqlstate="23505")),
    )

    response = client.post("/users/register", json={"role": "producer"})

    assert response.status_code == 409
    assert response.json() == {"error": "User already registered"}


def test_talent_profile_validation_errors_are_400(client, login):
    login()

    response = client.post(
        "/profiles/talent",
        json={"stageName": "A", "location": "Madrid", "age": 30, "headshotUrl": "https://cdn/a.jpg"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_producer_cannot_create_talent_profile(client, login, monkeypatch):
    login()
    monkeypatch.setattr(
        "castingfy.services.user_service.UserRepository.get_user",
        AsyncMock(return_value=_user(role="producer")),
    )

    response = client.post(
        "/profiles/talent",
        json={
            "stageName": "Ana Ruiz",
            "location": "Madrid",
            "age": 30,
            "headshotUrl": "https://cdn.example.com/ana.jpg",
        },
    )

    assert response.status_code == 403


def test_search_rejects_bad_role(client, login):
    login()

    response = client.get("/users/search", params={"role": "admin"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid role: admin"}


def test_missing_token_is_401(client):
    response = client.get("/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
