"""
Talent reviews written by producers.

One review per (talent, reviewer) pair, rating 1..5, never about oneself.
"""

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.api.media_models import ReviewCreateRequest
from castingfy.models.domain.review_domain import MAX_RATING, MIN_RATING, Review
from castingfy.repositories.media_repository import ReviewRepository
from castingfy.repositories.user_repository import UserRepository
from castingfy.services.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = get_logger(__name__)


def validate_review(reviewer_id: str, request: ReviewCreateRequest) -> None:
    """
    Raises:
        ValidationError: missing fields, rating out of range or a self-review
    """
    if not request.talent_user_id or request.rating is None or not (request.review_text or "").strip():
        raise ValidationError("talentUserId, rating, and reviewText are required", user_id=reviewer_id)
    if not MIN_RATING <= request.rating <= MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}", user_id=reviewer_id
        )
    if request.talent_user_id == reviewer_id:
        raise ValidationError("You cannot review yourself", user_id=reviewer_id)


async def list_reviews(talent_user_id: str | None) -> list[Review]:
    if not talent_user_id:
        raise ValidationError("talentUserId parameter is required")
    return await ReviewRepository.list_for_talent(talent_user_id)


async def create_review(ctx: AuthContext, request: ReviewCreateRequest) -> Review:
    """
    Raises:
        PermissionDeniedError: the caller is not a producer
        ValidationError: see validate_review
        ConflictError: the caller already reviewed this talent
    """
    user = await UserRepository.get_user(ctx.user_id)
    if not user or user.role != "producer":
        raise PermissionDeniedError("Only producers can create reviews", user_id=ctx.user_id)

    validate_review(ctx.user_id, request)

    try:
        return await ReviewRepository.insert(
            request.talent_user_id,
            ctx.user_id,
            request.rating,
            request.review_text.strip(),
            request.project_name or None,
        )
    except DatabaseError as e:
        if e.is_unique_violation:
            raise ConflictError("You have already reviewed this talent", user_id=ctx.user_id) from e
        if e.is_foreign_key_violation:
            raise NotFoundError("Talent not found", user_id=ctx.user_id) from e
        raise


async def delete_review(ctx: AuthContext, review_id: str | None) -> None:
    if not review_id:
        raise ValidationError("reviewId parameter is required", user_id=ctx.user_id)
    if not await ReviewRepository.delete(ctx.user_id, review_id):
        raise NotFoundError("Review not found", user_id=ctx.user_id)
    logger.info("Review deleted", user_id=ctx.user_id, review_id=review_id)
