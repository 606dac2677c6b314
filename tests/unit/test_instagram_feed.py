from unittest.mock import AsyncMock

import httpx
import pytest

from castingfy.services import instagram_service
from castingfy.services.errors import ValidationError


def _payload(count: int) -> dict:
    edges = [
        {
            "node": {
                "id": str(i),
                "shortcode": f"code{i}",
                "display_url": f"https://cdn.example.com/{i}.jpg",
                "thumbnail_src": f"https://cdn.example.com/{i}_thumb.jpg",
            }
        }
        for i in range(count)
    ]
    return {"graphql": {"user": {"username": "ana.ruiz", "edge_owner_to_timeline_media": {"edges": edges}}}}


@pytest.mark.parametrize(
    "raw",
    ["ana.ruiz", "@ana.ruiz", "https://www.instagram.com/ana.ruiz/", "instagram.com/ana.ruiz?hl=es"],
)
def test_username_forms_are_normalized(raw):
    assert instagram_service.normalize_username(raw) == "ana.ruiz"


def test_missing_username_is_rejected():
    with pytest.raises(ValidationError, match="Username is required"):
        instagram_service.normalize_username("  ")


def test_extract_photos_keeps_six_latest():
    photos = instagram_service.extract_photos(_payload(9))

    assert len(photos) == 6
    assert photos[0] == {
        "id": "0",
        "thumbnail": "https://cdn.example.com/0_thumb.jpg",
        "url": "https://www.instagram.com/p/code0/",
    }


def test_extract_photos_tolerates_empty_payload():
    assert instagram_service.extract_photos({}) == []


def _mock_client(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(instagram_service.httpx, "AsyncClient", factory)
    monkeypatch.setattr(instagram_service.cache, "get_json", AsyncMock(return_value=None))
    monkeypatch.setattr(instagram_service.cache, "set_json", AsyncMock(return_value=False))


@pytest.mark.asyncio
async def test_fetch_feed_returns_photos(monkeypatch):
    _mock_client(monkeypatch, lambda request: httpx.Response(200, json=_payload(2)))

    feed = await instagram_service.fetch_feed("@ana.ruiz")

    assert feed.success
    assert feed.username == "ana.ruiz"
    assert [photo["id"] for photo in feed.photos] == ["0", "1"]


@pytest.mark.asyncio
async def test_blocked_profile_yields_failure_feed(monkeypatch):
    _mock_client(monkeypatch, lambda request: httpx.Response(429, text="Please wait"))

    feed = await instagram_service.fetch_feed("ana.ruiz")

    assert not feed.success
    assert feed.photos == []
    assert feed.error == instagram_service.FAILURE_MESSAGE


@pytest.mark.asyncio
async def test_html_login_wall_yields_failure_feed(monkeypatch):
    _mock_client(monkeypatch, lambda request: httpx.Response(200, text="<html>login</html>"))

    feed = await instagram_service.fetch_feed("ana.ruiz")

    assert not feed.success
