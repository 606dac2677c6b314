# castingfy/models/api/user_request.py
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from castingfy.models.domain.user_domain import UserRole


def _check_url(value: str | None) -> str | None:
    if value in (None, ""):
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid URL")
    return value


class _Request(BaseModel):
    """Accepts both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RegisterUserRequest(_Request):
    """Body of POST /users/register (email/password sign-up)."""

    role: UserRole
    country: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)


class TalentProfileCreateRequest(_Request):
    stage_name: str = Field(..., min_length=2, max_length=100)
    location: str = Field(..., min_length=2, max_length=100)
    age: int = Field(..., ge=16, le=99)
    height: int | None = Field(default=None, ge=100, le=250)
    gender: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    headshot_url: str
    cover_image_url: str | None = None
    reel_url: str | None = None
    instagram_url: str | None = None
    imdb_url: str | None = None
    languages: list[str] = []
    skills: list[str] = []
    availability: str | None = None

    @field_validator("headshot_url")
    @classmethod
    def _headshot_is_url(cls, value: str) -> str:
        if not value:
            raise ValueError("headshot is required")
        return _check_url(value)

    @field_validator("cover_image_url", "reel_url", "instagram_url", "imdb_url")
    @classmethod
    def _optional_url(cls, value: str | None) -> str | None:
        return _check_url(value)


class ProducerProfileCreateRequest(_Request):
    company_name: str = Field(..., min_length=2, max_length=150)
    bio: str | None = Field(default=None, max_length=500)
    location: str | None = None
    headshot_url: str | None = None
    project_types: list[str] = []
    website: str | None = None
    credits: str | None = Field(default=None, max_length=1000)
    instagram_url: str | None = None
    imdb_url: str | None = None

    @field_validator("website", "headshot_url", "instagram_url", "imdb_url")
    @classmethod
    def _optional_url(cls, value: str | None) -> str | None:
        return _check_url(value)


class ProfileUpdateRequest(_Request):
    """PATCH /profiles/me: only the provided fields are written."""

    stage_name: str | None = Field(default=None, min_length=2, max_length=100)
    company_name: str | None = Field(default=None, min_length=2, max_length=150)
    bio: str | None = Field(default=None, max_length=500)
    location: str | None = None
    headshot_url: str | None = None
    cover_image_url: str | None = None
    instagram_url: str | None = None
    imdb_url: str | None = None

    @field_validator("headshot_url", "cover_image_url", "instagram_url", "imdb_url")
    @classmethod
    def _optional_url(cls, value: str | None) -> str | None:
        return _check_url(value)
