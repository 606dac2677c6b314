"""
public.py
---------
Purpose:
    Read-only endpoints for anonymous visitors: the casting board, public
    talent and producer pages, and the landing page talent strip.

Notes:
    - No auth dependency; nothing here exposes email addresses.
    - /public/talents is cacheable by CDNs.
"""

from fastapi import APIRouter, Query, Response

from castingfy.config import settings
from castingfy.models.api.project_response import (
    ActiveCasting,
    ActiveCastingProducer,
    ActiveCastingsResponse,
    PublicCasting,
    PublicCastingProducer,
    PublicCastingsResponse,
)
from castingfy.models.api.user_response import (
    PublicProducer,
    PublicProducerResponse,
    PublicTalent,
    PublicTalentResponse,
    TalentCard,
    TalentCardsResponse,
)
from castingfy.models.domain.project_domain import PublishedCasting
from castingfy.services import project_service, user_service

router = APIRouter(prefix="/public", tags=["public"])

DEFAULT_COMPANY_NAME = "Production Company"
BOARD_COMPANY_NAME = "Productor"


def _blobs(casting: PublishedCasting) -> tuple[list[dict], dict]:
    project = casting.project
    roles = [role.model_dump(by_alias=True) for role in project.roles]
    return roles, project.compensation.model_dump(by_alias=True)


@router.get("/castings", response_model=PublicCastingsResponse)
async def list_castings():
    castings = await project_service.list_published_castings()

    items = []
    for casting in castings:
        project = casting.project
        roles, compensation = _blobs(casting)
        items.append(
            PublicCasting(
                id=project.id,
                title=project.title,
                description=project.description,
                project_type=project.project_type,
                location=project.location or casting.producer_location,
                start_date=casting.start_date,
                end_date=casting.end_date,
                created_at=project.created_at,
                roles=roles,
                compensation=compensation,
                union_status=project.union_status,
                producer=PublicCastingProducer(
                    id=casting.producer_id,
                    company_name=casting.company_name or DEFAULT_COMPANY_NAME,
                    location=casting.producer_location,
                ),
            )
        )
    return PublicCastingsResponse(castings=items)


@router.get("/castings-active", response_model=ActiveCastingsResponse)
async def list_active_castings():
    """Casting board feed; an empty board is an empty list."""
    castings = await project_service.list_active_castings()

    items = []
    for casting in castings:
        project = casting.project
        roles, compensation = _blobs(casting)
        items.append(
            ActiveCasting(
                id=project.id,
                title=project.title,
                description=project.description,
                project_type=project.project_type,
                location=project.location,
                created_at=project.created_at,
                status=project.status,
                roles=roles,
                compensation=compensation,
                producer=ActiveCastingProducer(company_name=casting.company_name or BOARD_COMPANY_NAME),
            )
        )
    return ActiveCastingsResponse(castings=items, count=len(items))


@router.get("/talent/{user_id}", response_model=PublicTalentResponse)
async def get_talent(user_id: str):
    """
    Public talent page data.

    Raises:
        404: unknown user, not a talent, not verified or no profile
    """
    user, profile = await user_service.get_public_talent(user_id)
    return PublicTalentResponse(
        talent=PublicTalent(
            id=user.id,
            role=user.role,
            stage_name=profile.stage_name or user.email_handle,
            bio=profile.bio,
            location=profile.location,
            headshot_url=profile.headshot_url,
            cover_image_url=profile.cover_image_url,
            instagram_url=profile.instagram_url,
            imdb_url=profile.imdb_url,
        )
    )


@router.get("/producer/{user_id}", response_model=PublicProducerResponse)
async def get_producer(user_id: str):
    user, profile = await user_service.get_public_producer(user_id)
    return PublicProducerResponse(
        producer=PublicProducer(
            id=user.id,
            role=user.role,
            company_name=profile.company_name,
            bio=profile.bio,
            location=profile.location,
            headshot_url=profile.headshot_url,
            project_types=profile.project_types,
            website=profile.website,
            instagram_url=profile.instagram_url,
            imdb_url=profile.imdb_url,
        )
    )


@router.get("/talents", response_model=TalentCardsResponse)
async def list_talents(response: Response, limit: int = Query(default=9, ge=1, le=50)):
    talents = await user_service.list_recent_talents(limit)

    cache_seconds = settings.PUBLIC_TALENTS_CACHE_SECONDS
    response.headers["Cache-Control"] = (
        f"public, s-maxage={cache_seconds}, stale-while-revalidate={cache_seconds * 2}"
    )
    return TalentCardsResponse(
        talents=[
            TalentCard(
                id=talent.user_id,
                name=talent.stage_name,
                avatar=talent.headshot_url,
                location=talent.location,
            )
            for talent in talents
        ]
    )
