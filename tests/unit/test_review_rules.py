from unittest.mock import AsyncMock

import pytest

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError
from castingfy.models.api.media_models import ReviewCreateRequest
from castingfy.models.domain.user_domain import User
from castingfy.services import review_service
from castingfy.services.errors import ConflictError, PermissionDeniedError, ValidationError

PRODUCER = User(id="producer-1", email="norte@example.com", role="producer", status="verified")


def _request(**overrides) -> ReviewCreateRequest:
    data = {"talentUserId": "talent-1", "rating": 5, "reviewText": "Great on set"}
    data.update(overrides)
    return ReviewCreateRequest(**data)


def test_valid_review_passes():
    review_service.validate_review("producer-1", _request())


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_must_be_between_one_and_five(rating):
    with pytest.raises(ValidationError, match="Rating must be between 1 and 5"):
        review_service.validate_review("producer-1", _request(rating=rating))


def test_review_text_is_required():
    with pytest.raises(ValidationError):
        review_service.validate_review("producer-1", _request(reviewText="  "))


def test_self_review_is_rejected():
    with pytest.raises(ValidationError, match="yourself"):
        review_service.validate_review("talent-1", _request())


@pytest.mark.asyncio
async def test_only_producers_can_review(monkeypatch):
    talent = User(id="talent-9", email="t@example.com", role="talent", status="verified")
    monkeypatch.setattr(
        "castingfy.services.review_service.UserRepository.get_user", AsyncMock(return_value=talent)
    )

    with pytest.raises(PermissionDeniedError):
        await review_service.create_review(AuthContext(user_id="talent-9"), _request())


@pytest.mark.asyncio
async def test_second_review_conflicts(monkeypatch):
    monkeypatch.setattr(
        "castingfy.services.review_service.UserRepository.get_user", AsyncMock(return_value=PRODUCER)
    )
    monkeypatch.setattr(
        "castingfy.services.review_service.ReviewRepository.insert",
        AsyncMock(side_effect=DatabaseError("duplicate key", sqlstate="23505")),
    )

    with pytest.raises(ConflictError):
        await review_service.create_review(AuthContext(user_id="producer-1"), _request())
