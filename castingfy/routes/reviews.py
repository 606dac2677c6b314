"""
reviews.py
----------
Purpose:
    Producer reviews shown on talent profiles.
"""

from fastapi import APIRouter, Depends, Query

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.models.api.media_models import ReviewCreateRequest, ReviewListResponse, ReviewResponse
from castingfy.models.api.network_models import SuccessResponse
from castingfy.services import review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=ReviewListResponse)
async def list_reviews(talent_user_id: str | None = Query(default=None, alias="talentUserId")):
    reviews = await review_service.list_reviews(talent_user_id)
    return ReviewListResponse(reviews=reviews)


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(request: ReviewCreateRequest, ctx: AuthContext = Depends(get_auth_context)):
    """
    Raises:
        400: missing fields, rating outside 1..5, self-review
        403: caller is not a producer
        409: caller already reviewed this talent
    """
    review = await review_service.create_review(ctx, request)
    return ReviewResponse(review=review)


@router.delete("", response_model=SuccessResponse)
async def delete_review(
    review_id: str | None = Query(default=None, alias="reviewId"),
    ctx: AuthContext = Depends(get_auth_context),
):
    await review_service.delete_review(ctx, review_id)
    return SuccessResponse()
