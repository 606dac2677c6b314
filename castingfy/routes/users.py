"""
users.py
--------
Purpose:
    Account and profile endpoints for authenticated users.

Usage:
    1. POST /users/register - create the account row after email sign-up
    2. POST /users/sync - OAuth sign-in; creates the row on first login
    3. GET /me - account plus completed profile
    4. POST /profiles/talent | /profiles/producer - complete the profile
    5. PATCH /profiles/me - edit the profile
    6. GET /users/search - find verified users to connect with
"""

from fastapi import APIRouter, Depends, Query, status

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.config import settings
from castingfy.models.api.user_request import (
    ProducerProfileCreateRequest,
    ProfileUpdateRequest,
    RegisterUserRequest,
    TalentProfileCreateRequest,
)
from castingfy.models.api.user_response import (
    MeResponse,
    ProfileResponse,
    UserSearchResponse,
    UserSearchResult,
    UserSyncResponse,
)
from castingfy.models.domain.user_domain import User
from castingfy.services import search_service, user_service

router = APIRouter(tags=["users"])

COMPLETE_PROFILE_PATH = "/registro/completar-perfil"
DASHBOARD_PATH = "/dashboard"


@router.post("/users/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterUserRequest, ctx: AuthContext = Depends(get_auth_context)) -> dict[str, User]:
    """
    Create the users row (status pending) for a fresh email/password account.

    Raises:
        409: account row already exists
    """
    user = await user_service.register_user(ctx, request)
    return {"user": user}


@router.post("/users/sync", response_model=UserSyncResponse)
async def sync_user(ctx: AuthContext = Depends(get_auth_context)):
    """
    Called after an OAuth sign-in. New identities become verified talent
    and are sent to profile completion.
    """
    user, created = await user_service.ensure_user_row(ctx)
    next_path = DASHBOARD_PATH
    if created:
        next_path = COMPLETE_PROFILE_PATH
    else:
        _, profile = await user_service.get_me(ctx)
        if profile is None:
            next_path = COMPLETE_PROFILE_PATH

    return UserSyncResponse(user=user, created=created, next=next_path)


@router.get("/me", response_model=MeResponse)
async def me(ctx: AuthContext = Depends(get_auth_context)):
    user, profile = await user_service.get_me(ctx)
    return MeResponse(user=user, profile=profile)


@router.post("/profiles/talent", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_talent_profile(
    request: TalentProfileCreateRequest, ctx: AuthContext = Depends(get_auth_context)
):
    profile = await user_service.create_talent_profile(ctx, request)
    return ProfileResponse(profile=profile)


@router.post("/profiles/producer", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_producer_profile(
    request: ProducerProfileCreateRequest, ctx: AuthContext = Depends(get_auth_context)
):
    profile = await user_service.create_producer_profile(ctx, request)
    return ProfileResponse(profile=profile)


@router.patch("/profiles/me", response_model=ProfileResponse)
async def update_profile(request: ProfileUpdateRequest, ctx: AuthContext = Depends(get_auth_context)):
    profile = await user_service.update_my_profile(ctx, request)
    return ProfileResponse(profile=profile)


@router.get("/users/search", response_model=UserSearchResponse)
async def search_users(
    q: str = "",
    role: str | None = None,
    limit: int = Query(default=settings.SEARCH_DEFAULT_LIMIT),
    gender: str = "",
    skills: str = "",
    location: str = "",
    ctx: AuthContext = Depends(get_auth_context),
):
    """
    Search verified users other than the caller.

    Query:
        q: free text over display name, bio and location
        role: talent | producer
        gender, skills (comma separated, all required), location: talent filters
    """
    filters = search_service.SearchFilters(
        query=q.strip(),
        role=role or None,
        gender=gender,
        skills=search_service.parse_skills(skills),
        location=location.strip(),
        limit=limit,
    )
    hits = await search_service.search_users(ctx, filters)

    return UserSearchResponse(
        users=[
            UserSearchResult(
                **hit.summary.model_dump(),
                connection_status=hit.connection_status,
            )
            for hit in hits
        ]
    )
