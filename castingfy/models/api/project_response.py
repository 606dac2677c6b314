# castingfy/models/api/project_response.py
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from castingfy.models.domain.project_domain import Project


class ProjectResponse(BaseModel):
    project: Project


class ProjectListResponse(BaseModel):
    projects: list[Project]


class PublicCastingProducer(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    company_name: str
    location: str | None = None


class PublicCasting(BaseModel):
    """Published project as shown to anonymous visitors."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    project_type: str
    location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    created_at: datetime | None = None
    roles: list[dict[str, Any]] = []
    compensation: dict[str, Any] = {}
    union_status: str = ""
    producer: PublicCastingProducer


class PublicCastingsResponse(BaseModel):
    castings: list[PublicCasting]


class ActiveCastingProducer(BaseModel):
    company_name: str


class ActiveCasting(BaseModel):
    """Casting board entry; keeps the snake_case keys the board reads."""

    id: str
    title: str
    description: str
    project_type: str
    location: str | None = None
    created_at: datetime | None = None
    status: str
    roles: list[dict[str, Any]] = []
    compensation: dict[str, Any] = {}
    producer: ActiveCastingProducer


class ActiveCastingsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    castings: list[ActiveCasting]
    count: int
