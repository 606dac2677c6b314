"""
Talent gallery.

Images are ordered by display_order, newest first within the same order.
At most one image per owner is the cover.
"""

from castingfy.auth.verify import AuthContext
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.api.media_models import GalleryImageCreateRequest, GalleryImageUpdateRequest
from castingfy.models.domain.media_domain import GalleryImage
from castingfy.repositories.media_repository import GalleryRepository
from castingfy.services.errors import NotFoundError, ValidationError

logger = get_logger(__name__)


async def list_images(user_id: str | None) -> list[GalleryImage]:
    if not user_id:
        raise ValidationError("userId parameter is required")
    return await GalleryRepository.list_for_user(user_id)


async def add_image(ctx: AuthContext, request: GalleryImageCreateRequest) -> GalleryImage:
    if not request.image_url:
        raise ValidationError("image_url is required", user_id=ctx.user_id)

    return await GalleryRepository.insert(
        ctx.user_id,
        request.image_url,
        title=request.title or None,
        description=request.description or None,
        display_order=request.display_order or 0,
        is_cover=bool(request.is_cover),
    )


async def update_image(ctx: AuthContext, request: GalleryImageUpdateRequest) -> GalleryImage:
    """Write only the provided fields; the owner scope makes foreign ids a 404."""
    if not request.image_id:
        raise ValidationError("imageId is required", user_id=ctx.user_id)

    image = await GalleryRepository.update(ctx.user_id, request.image_id, request.changes())
    if not image:
        raise NotFoundError("Image not found", user_id=ctx.user_id)
    return image


async def delete_image(ctx: AuthContext, image_id: str | None) -> None:
    if not image_id:
        raise ValidationError("imageId parameter is required", user_id=ctx.user_id)
    if not await GalleryRepository.delete(ctx.user_id, image_id):
        raise NotFoundError("Image not found", user_id=ctx.user_id)
    logger.info("Gallery image deleted", user_id=ctx.user_id, image_id=image_id)
