"""
Instagram feed for talent profiles.

A best-effort scrape of the public profile JSON. Instagram changes or
blocks this endpoint often, so any failure yields an empty feed and the
client shows placeholders. Successful feeds are cached in Redis.
"""

import re
from dataclasses import dataclass, field

import httpx

from castingfy.config import settings
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.services.cache_client import cache
from castingfy.services.errors import ValidationError

logger = get_logger(__name__)

PROFILE_URL = "https://www.instagram.com/{username}/?__a=1&__d=dis"
POST_URL = "https://www.instagram.com/p/{shortcode}/"
MAX_PHOTOS = 6
FAILURE_MESSAGE = "Could not fetch Instagram photos"
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9._]{1,30}$")

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "same-origin",
}


@dataclass
class InstagramFeed:
    success: bool
    photos: list[dict] = field(default_factory=list)
    username: str | None = None
    error: str | None = None


def normalize_username(raw: str | None) -> str:
    """Accept `name`, `@name` or a profile URL."""
    value = (raw or "").strip()
    if "instagram.com/" in value:
        value = value.split("instagram.com/", 1)[1].split("/")[0].split("?")[0]
    value = value.lstrip("@")
    if not USERNAME_PATTERN.match(value):
        raise ValidationError("Username is required")
    return value


def extract_photos(payload: dict) -> list[dict]:
    user = ((payload or {}).get("graphql") or {}).get("user") or {}
    edges = (user.get("edge_owner_to_timeline_media") or {}).get("edges") or []

    photos = []
    for edge in edges[:MAX_PHOTOS]:
        node = edge.get("node") or {}
        photos.append(
            {
                "id": str(node["id"]),
                "thumbnail": node.get("thumbnail_src") or node["display_url"],
                "url": POST_URL.format(shortcode=node["shortcode"]),
            }
        )
    return photos


async def fetch_feed(raw_username: str | None) -> InstagramFeed:
    """
    Latest photos of a public Instagram profile.

    Raises:
        ValidationError: no usable username
    """
    username = normalize_username(raw_username)
    cache_key = f"instagram:feed:{username.lower()}"

    cached = await cache.get_json(cache_key)
    if cached is not None:
        return InstagramFeed(success=True, photos=cached, username=username)

    try:
        async with httpx.AsyncClient(
            timeout=settings.INSTAGRAM_TIMEOUT_SECONDS, headers=BROWSER_HEADERS, follow_redirects=True
        ) as client:
            response = await client.get(PROFILE_URL.format(username=username))
            response.raise_for_status()
            payload = response.json()
        photos = extract_photos(payload)
        feed_username = ((payload.get("graphql") or {}).get("user") or {}).get("username") or username
    except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Instagram feed unavailable", username=username, error=str(e))
        return InstagramFeed(success=False, error=FAILURE_MESSAGE)

    await cache.set_json(cache_key, photos, settings.INSTAGRAM_CACHE_TTL_SECONDS)
    return InstagramFeed(success=True, photos=photos, username=feed_username)
