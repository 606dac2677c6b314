from datetime import date
from unittest.mock import AsyncMock

from castingfy.models.domain.project_domain import Project, PublishedCasting, Role
from castingfy.models.domain.user_domain import TalentProfile, User


def test_public_talents_are_cacheable(client, monkeypatch):
    talents = [
        TalentProfile(user_id="t-1", stage_name="Ana Ruiz", headshot_url="https://cdn/a.jpg", location="Madrid")
    ]
    listing = AsyncMock(return_value=talents)
    monkeypatch.setattr("castingfy.services.user_service.ProfileRepository.list_recent_talents", listing)

    response = client.get("/public/talents")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, s-maxage=300, stale-while-revalidate=600"
    assert response.json() == {
        "talents": [{"id": "t-1", "name": "Ana Ruiz", "avatar": "https://cdn/a.jpg", "location": "Madrid"}]
    }
    listing.assert_awaited_once_with(9)


def test_unverified_talent_is_hidden(client, monkeypatch):
    pending = User(id="t-1", email="ana@example.com", role="talent", status="pending")
    monkeypatch.setattr(
        "castingfy.services.user_service.UserRepository.get_user", AsyncMock(return_value=pending)
    )

    response = client.get("/public/talent/t-1")

    assert response.status_code == 404
    assert response.json() == {"error": "Talent not found"}


def test_public_talent_page_has_no_email(client, monkeypatch):
    user = User(id="t-1", email="ana@example.com", role="talent", status="verified")
    profile = TalentProfile(user_id="t-1", stage_name="Ana Ruiz", bio="Actress")
    monkeypatch.setattr("castingfy.services.user_service.UserRepository.get_user", AsyncMock(return_value=user))
    monkeypatch.setattr(
        "castingfy.services.user_service.ProfileRepository.get_talent_profile",
        AsyncMock(return_value=profile),
    )

    talent = client.get("/public/talent/t-1").json()["talent"]

    assert talent["stageName"] == "Ana Ruiz"
    assert "email" not in talent


def test_casting_board_falls_back_to_generic_company(client, monkeypatch):
    casting = PublishedCasting(
        project=Project(id="p-1", title="Short Film A", status="published", roles=[Role(id="r-1", name="Lead")]),
        producer_id="producer-1",
        company_name=None,
        start_date=date(2025, 1, 10),
    )
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.list_published",
        AsyncMock(return_value=[casting]),
    )

    public = client.get("/public/castings").json()["castings"][0]
    active = client.get("/public/castings-active").json()

    assert public["producer"]["companyName"] == "Production Company"
    assert public["startDate"] == "2025-01-10"
    assert public["roles"][0]["name"] == "Lead"
    assert active["count"] == 1
    assert active["castings"][0]["producer"] == {"company_name": "Productor"}


def test_empty_board(client, monkeypatch):
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.list_published",
        AsyncMock(return_value=[]),
    )

    assert client.get("/public/castings-active").json() == {"castings": [], "count": 0}


def test_instagram_feed_failure_is_200(client, monkeypatch):
    from castingfy.services.instagram_service import InstagramFeed

    monkeypatch.setattr(
        "castingfy.routes.social.instagram_service.fetch_feed",
        AsyncMock(return_value=InstagramFeed(success=False, error="Could not fetch Instagram photos")),
    )

    response = client.get("/instagram/feed", params={"username": "ana.ruiz"})

    assert response.status_code == 200
    assert response.json() == {"success": False, "photos": [], "error": "Could not fetch Instagram photos"}


def test_instagram_feed_requires_username(client):
    response = client.get("/instagram/feed")

    assert response.status_code == 400
    assert response.json() == {"error": "Username is required"}


def test_public_talent_with_null_array_columns(client, monkeypatch):
    rows = [
        {"id": "talent-1", "email": "ana@example.com", "role": "talent", "status": "verified"},
        {
            "id": "profile-1",
            "user_id": "talent-1",
            "stage_name": "Ana Ruiz",
            "location": "Madrid",
            "languages": None,
            "skills": None,
        },
    ]
    monkeypatch.setattr(
        "castingfy.repositories.user_repository.fetch_one", AsyncMock(side_effect=rows)
    )

    response = client.get("/public/talent/talent-1")

    assert response.status_code == 200
    assert response.json()["talent"]["stageName"] == "Ana Ruiz"
