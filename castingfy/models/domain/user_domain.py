from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

UserRole = Literal["talent", "producer"]
UserStatus = Literal["pending", "verified", "rejected"]

USER_ROLES: tuple[str, ...] = ("talent", "producer")


class User(BaseModel):
    """Row of the users table."""

    id: str
    email: str
    role: UserRole
    status: UserStatus = "pending"
    country: str | None = None
    postal_code: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def email_handle(self) -> str:
        return self.email.split("@")[0] if self.email else ""


class TalentProfile(BaseModel):
    """Row of talent_profiles (1:1 with a talent user)."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    user_id: str
    stage_name: str
    bio: str | None = None
    location: str | None = None
    age: int | None = None
    gender: str | None = None
    height: int | None = None
    headshot_url: str | None = None
    cover_image_url: str | None = None
    reel_url: str | None = None
    instagram_url: str | None = None
    imdb_url: str | None = None
    languages: list[str] = []
    skills: list[str] = []
    availability: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("languages", "skills", mode="before")
    @classmethod
    def _null_array_as_empty(cls, value):
        return [] if value is None else value


class ProducerProfile(BaseModel):
    """Row of producer_profiles (1:1 with a producer user)."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    user_id: str
    company_name: str
    bio: str | None = None
    location: str | None = None
    headshot_url: str | None = None
    project_types: list[str] = []
    website: str | None = None
    credits: str | None = None
    instagram_url: str | None = None
    imdb_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("project_types", mode="before")
    @classmethod
    def _null_array_as_empty(cls, value):
        return [] if value is None else value


class UserSummary(BaseModel):
    """How another user is shown in lists (search, connections, chat)."""

    id: str
    email: str | None = None
    role: str | None = None
    display_name: str
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None

    @classmethod
    def build(
        cls, user: User | None, profile: TalentProfile | ProducerProfile | None, fallback_id: str
    ) -> "UserSummary":
        display_name = user.email_handle if user else ""
        avatar_url = bio = location = None

        if isinstance(profile, TalentProfile):
            display_name = profile.stage_name or display_name
        elif isinstance(profile, ProducerProfile):
            display_name = profile.company_name or display_name
        if profile is not None:
            avatar_url = profile.headshot_url
            bio = profile.bio
            location = profile.location

        return cls(
            id=user.id if user else fallback_id,
            email=user.email if user else None,
            role=user.role if user else None,
            display_name=display_name,
            avatar_url=avatar_url,
            bio=bio,
            location=location,
        )
