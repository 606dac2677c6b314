"""
User/talent search.

Candidates are verified users other than the caller, optionally limited to
one role. Each candidate's profile is read separately and the talent
filters and free text are applied in Python:

- gender: equality
- skills: the candidate must have every requested skill
- location: case-insensitive substring
- free text: case-insensitive substring of "display name, bio, location"

Results are capped by a flat limit; there is no ranking.
"""

from dataclasses import dataclass, field

from castingfy.auth.verify import AuthContext
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.user_domain import ProducerProfile, TalentProfile, UserSummary
from castingfy.repositories.network_repository import ConnectionRepository
from castingfy.repositories.user_repository import ProfileRepository, UserRepository
from castingfy.services.errors import ValidationError

logger = get_logger(__name__)

MAX_LIMIT = 100
SEARCHABLE_ROLES = ("talent", "producer")


@dataclass(frozen=True)
class SearchFilters:
    query: str = ""
    role: str | None = None
    gender: str = ""
    skills: tuple[str, ...] = ()
    location: str = ""
    limit: int = 20


@dataclass
class SearchHit:
    summary: UserSummary
    connection_status: str = "none"
    profile: TalentProfile | ProducerProfile | None = field(default=None, repr=False)


def parse_skills(raw: str | None) -> tuple[str, ...]:
    """`Acting,Dance` -> ("Acting", "Dance"); blanks are dropped."""
    if not raw:
        return ()
    return tuple(skill.strip() for skill in raw.split(",") if skill.strip())


def matches_filters(
    summary: UserSummary,
    profile: TalentProfile | ProducerProfile | None,
    filters: SearchFilters,
) -> bool:
    """
    Decide whether one candidate survives the filters.

    Talent filters only apply to candidates with a talent profile; a
    candidate without one is judged on the free text alone.
    """
    if isinstance(profile, TalentProfile):
        if filters.gender and profile.gender != filters.gender:
            return False
        if filters.skills and not set(filters.skills).issubset(profile.skills or []):
            return False
        if filters.location and filters.location.lower() not in (profile.location or "").lower():
            return False

    if filters.query:
        searchable = f"{summary.display_name} {summary.bio or ''} {summary.location or ''}".lower()
        if filters.query.lower() not in searchable:
            return False
    return True


async def search_users(ctx: AuthContext, filters: SearchFilters) -> list[SearchHit]:
    """
    Run a search for the caller.

    Raises:
        ValidationError: unknown role or a limit outside 1..100
    """
    if filters.role is not None and filters.role not in SEARCHABLE_ROLES:
        raise ValidationError(f"Invalid role: {filters.role}", user_id=ctx.user_id)
    if not 1 <= filters.limit <= MAX_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}", user_id=ctx.user_id)

    candidates = await UserRepository.list_verified_users(ctx.user_id, filters.role, filters.limit)
    statuses = await ConnectionRepository.statuses_for(ctx.user_id)

    hits = []
    for candidate in candidates:
        profile = await ProfileRepository.get_profile_for(candidate)
        summary = UserSummary.build(candidate, profile, candidate.id)
        if not matches_filters(summary, profile, filters):
            continue
        hits.append(
            SearchHit(
                summary=summary,
                connection_status=statuses.get(candidate.id, "none"),
                profile=profile,
            )
        )

    logger.info(
        "User search completed",
        user_id=ctx.user_id,
        role=filters.role,
        candidates=len(candidates),
        results=len(hits),
    )
    return hits
