# castingfy/models/api/user_response.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from castingfy.models.domain.user_domain import ProducerProfile, TalentProfile, User


class _CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MeResponse(BaseModel):
    """API response for /me endpoint."""

    user: User = Field(..., description="The users row of the caller")
    profile: TalentProfile | ProducerProfile | None = Field(
        default=None, description="Profile matching the caller's role, if completed"
    )


class UserSyncResponse(BaseModel):
    """Response for POST /users/sync (OAuth sign-in)."""

    user: User
    created: bool
    next: str


class ProfileResponse(BaseModel):
    profile: TalentProfile | ProducerProfile


class PublicTalent(_CamelResponse):
    id: str
    role: str
    stage_name: str
    bio: str | None = None
    location: str | None = None
    headshot_url: str | None = None
    cover_image_url: str | None = None
    instagram_url: str | None = None
    imdb_url: str | None = None


class PublicTalentResponse(BaseModel):
    talent: PublicTalent


class PublicProducer(_CamelResponse):
    id: str
    role: str
    company_name: str
    bio: str | None = None
    location: str | None = None
    headshot_url: str | None = None
    project_types: list[str] = []
    website: str | None = None
    instagram_url: str | None = None
    imdb_url: str | None = None


class PublicProducerResponse(BaseModel):
    producer: PublicProducer


class TalentCard(BaseModel):
    """Landing page talent tile."""

    id: str
    name: str
    avatar: str | None = None
    location: str | None = None


class TalentCardsResponse(BaseModel):
    talents: list[TalentCard]


class UserSearchResult(_CamelResponse):
    id: str
    email: str | None = None
    role: str | None = None
    display_name: str
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    connection_status: str = "none"


class UserSearchResponse(BaseModel):
    users: list[UserSearchResult]


class OtherUser(_CamelResponse):
    """The other participant of a connection or conversation."""

    id: str
    email: str | None = None
    role: str | None = None
    display_name: str
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None

