"""
User and profile service.

Owns the users row lifecycle (email sign-up and OAuth sync), the one
profile each user completes for their role, and the public projections
shown to anonymous visitors.

Service layer returns domain models only - API layer handles HTTP concerns.
"""

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.api.user_request import (
    ProducerProfileCreateRequest,
    ProfileUpdateRequest,
    RegisterUserRequest,
    TalentProfileCreateRequest,
)
from castingfy.models.domain.user_domain import ProducerProfile, TalentProfile, User
from castingfy.repositories.user_repository import ProfileRepository, UserRepository
from castingfy.services.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamError,
)

logger = get_logger(__name__)

TALENT_EDITABLE = {
    "stage_name", "bio", "location", "headshot_url", "cover_image_url", "instagram_url", "imdb_url",
}
PRODUCER_EDITABLE = {
    "company_name", "bio", "location", "headshot_url", "instagram_url", "imdb_url",
}


async def require_user(ctx: AuthContext) -> User:
    """The caller's users row; a token without one cannot act yet."""
    user = await UserRepository.get_user(ctx.user_id)
    if not user:
        raise NotFoundError("User not found", user_id=ctx.user_id)
    return user


async def register_user(ctx: AuthContext, request: RegisterUserRequest) -> User:
    """
    Create the users row after an email/password sign-up.

    The account starts as `pending` until the team verifies it.

    Raises:
        AuthenticationError: token carries no email
        ConflictError: the row already exists
    """
    if not ctx.email:
        raise AuthenticationError("Token has no email claim", user_id=ctx.user_id)

    try:
        return await UserRepository.create_user(
            ctx.user_id,
            ctx.email,
            role=request.role,
            status="pending",
            country=request.country,
            postal_code=request.postal_code,
        )
    except DatabaseError as e:
        if e.is_unique_violation:
            raise ConflictError("User already registered", user_id=ctx.user_id) from e
        logger.error("Error registering user", user_id=ctx.user_id, error=str(e))
        raise UpstreamError(f"Error registering user: {e}", user_id=ctx.user_id) from e


async def ensure_user_row(ctx: AuthContext) -> tuple[User, bool]:
    """
    OAuth sign-in: make sure the identity has a users row.

    A first OAuth sign-in creates a verified talent account; the caller is
    then routed to profile completion.

    Returns:
        (user, created)
    """
    existing = await UserRepository.get_user(ctx.user_id)
    if existing:
        return existing, False

    if not ctx.email:
        raise AuthenticationError("Token has no email claim", user_id=ctx.user_id)

    try:
        user = await UserRepository.create_user(ctx.user_id, ctx.email, role="talent", status="verified")
    except DatabaseError as e:
        if e.is_unique_violation:
            # Two first sign-ins raced; the other one created the row.
            return await require_user(ctx), False
        logger.error("Error creating OAuth user", user_id=ctx.user_id, error=str(e))
        raise UpstreamError(f"Error creating user: {e}", user_id=ctx.user_id) from e

    logger.info("OAuth user created", user_id=ctx.user_id)
    return user, True


async def get_me(ctx: AuthContext) -> tuple[User, TalentProfile | ProducerProfile | None]:
    user = await require_user(ctx)
    profile = await ProfileRepository.get_profile_for(user)
    return user, profile


async def _create_profile(ctx: AuthContext, role: str, values: dict):
    user = await require_user(ctx)
    if user.role != role:
        raise PermissionDeniedError(
            f"Only {role} accounts can create a {role} profile", user_id=ctx.user_id
        )

    try:
        if role == "talent":
            return await ProfileRepository.create_talent_profile(user.id, values)
        return await ProfileRepository.create_producer_profile(user.id, values)
    except DatabaseError as e:
        if e.is_unique_violation:
            raise ConflictError("Profile already exists", user_id=ctx.user_id) from e
        logger.error("Error creating profile", user_id=ctx.user_id, role=role, error=str(e))
        raise UpstreamError(f"Error creating profile: {e}", user_id=ctx.user_id) from e


async def create_talent_profile(
    ctx: AuthContext, request: TalentProfileCreateRequest
) -> TalentProfile:
    return await _create_profile(ctx, "talent", request.model_dump())


async def create_producer_profile(
    ctx: AuthContext, request: ProducerProfileCreateRequest
) -> ProducerProfile:
    return await _create_profile(ctx, "producer", request.model_dump())


async def update_my_profile(
    ctx: AuthContext, request: ProfileUpdateRequest
) -> TalentProfile | ProducerProfile:
    """
    Edit the caller's profile; fields of the other role are ignored.

    Raises:
        NotFoundError: the caller has not completed a profile yet
    """
    user = await require_user(ctx)
    changes = request.model_dump(exclude_unset=True)

    if user.role == "producer":
        values = {key: value for key, value in changes.items() if key in PRODUCER_EDITABLE}
        profile = await ProfileRepository.update_producer_profile(user.id, values)
    else:
        values = {key: value for key, value in changes.items() if key in TALENT_EDITABLE}
        profile = await ProfileRepository.update_talent_profile(user.id, values)

    if not profile:
        raise NotFoundError("Profile not found", user_id=ctx.user_id)

    logger.info("Profile updated", user_id=ctx.user_id, fields=sorted(values))
    return profile


async def get_public_talent(user_id: str) -> tuple[User, TalentProfile]:
    """Only verified talent accounts are visible to the public."""
    user = await UserRepository.get_user(user_id)
    if not user or user.role != "talent" or user.status != "verified":
        raise NotFoundError("Talent not found")

    profile = await ProfileRepository.get_talent_profile(user_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return user, profile


async def get_public_producer(user_id: str) -> tuple[User, ProducerProfile]:
    user = await UserRepository.get_user(user_id)
    if not user or user.role != "producer":
        raise NotFoundError("Producer not found")

    profile = await ProfileRepository.get_producer_profile(user_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return user, profile


async def list_recent_talents(limit: int = 9) -> list[TalentProfile]:
    return await ProfileRepository.list_recent_talents(limit)
