"""
favorites.py
------------
Purpose:
    The caller's bookmarked users.
"""

from fastapi import APIRouter, Depends, Query

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.models.api.network_models import (
    FavoriteCreateRequest,
    FavoriteIdsResponse,
    FavoriteResponse,
    SuccessResponse,
)
from castingfy.services import favorite_service

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=FavoriteIdsResponse)
async def list_favorites(ctx: AuthContext = Depends(get_auth_context)):
    return FavoriteIdsResponse(favorites=await favorite_service.list_favorite_ids(ctx))


@router.post("", response_model=FavoriteResponse, status_code=201)
async def add_favorite(request: FavoriteCreateRequest, ctx: AuthContext = Depends(get_auth_context)):
    favorite = await favorite_service.add_favorite(ctx, request.favorited_user_id)
    return FavoriteResponse(favorite=favorite)


@router.delete("", response_model=SuccessResponse)
async def remove_favorite(
    favorited_user_id: str | None = Query(default=None, alias="favoritedUserId"),
    ctx: AuthContext = Depends(get_auth_context),
):
    await favorite_service.remove_favorite(ctx, favorited_user_id)
    return SuccessResponse()
