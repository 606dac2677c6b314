"""
social.py
---------
Purpose:
    Instagram photo strip for public talent pages.

Notes:
    Always answers 200 once a username is given; an unreachable or
    changed Instagram yields success=false and no photos.
"""

from fastapi import APIRouter

from castingfy.models.api.media_models import InstagramFeedResponse, InstagramPhoto
from castingfy.services import instagram_service

router = APIRouter(prefix="/instagram", tags=["social"])


@router.get("/feed", response_model=InstagramFeedResponse, response_model_exclude_none=True)
async def instagram_feed(username: str | None = None):
    feed = await instagram_service.fetch_feed(username)
    return InstagramFeedResponse(
        success=feed.success,
        photos=[InstagramPhoto(**photo) for photo in feed.photos],
        username=feed.username,
        error=feed.error,
    )
