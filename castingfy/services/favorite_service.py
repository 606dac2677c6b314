"""Favorites: a private bookmark list of other users."""

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError
from castingfy.models.domain.network_domain import Favorite
from castingfy.repositories.network_repository import FavoriteRepository
from castingfy.services.errors import ConflictError, NotFoundError, ValidationError


async def list_favorite_ids(ctx: AuthContext) -> list[str]:
    favorites = await FavoriteRepository.list_for_user(ctx.user_id)
    return [favorite.favorited_user_id for favorite in favorites]


async def add_favorite(ctx: AuthContext, favorited_user_id: str | None) -> Favorite:
    if not favorited_user_id:
        raise ValidationError("favoritedUserId is required", user_id=ctx.user_id)
    if favorited_user_id == ctx.user_id:
        raise ValidationError("You cannot favorite yourself", user_id=ctx.user_id)

    try:
        return await FavoriteRepository.insert(ctx.user_id, favorited_user_id)
    except DatabaseError as e:
        if e.is_unique_violation:
            raise ConflictError("Already in favorites", user_id=ctx.user_id) from e
        if e.is_foreign_key_violation:
            raise NotFoundError("User not found", user_id=ctx.user_id) from e
        raise


async def remove_favorite(ctx: AuthContext, favorited_user_id: str | None) -> None:
    if not favorited_user_id:
        raise ValidationError("favoritedUserId is required", user_id=ctx.user_id)
    await FavoriteRepository.delete(ctx.user_id, favorited_user_id)
