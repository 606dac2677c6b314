"""
Domain models for the project (casting) aggregate.

A project row carries its roles, per-role compensation and pre-screen
setup as JSON blobs. The blobs keep the camelCase keys the web client
writes (`byRole`, `ageMin`, ...), so every model here serializes by alias.
"""

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ProjectStatus = Literal["draft", "published"]


class _Blob(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RoleRequirements(_Blob):
    gender: list[str] = []
    ethnicity: list[str] = []
    skills: list[str] = []
    media: list[str] = []
    accent: list[str] = []
    language: list[str] = []
    voice_style: list[str] = []
    software_skills: list[str] = []


class RoleFlags(_Blob):
    nudity: bool = False
    explicit_content: bool = False


class Role(_Blob):
    id: str | None = None
    category: str = ""
    subtype: str = ""
    name: str = ""
    description: str = ""
    age_min: int | None = None
    age_max: int | None = None
    is_remote: bool = False
    requirements: RoleRequirements = Field(default_factory=RoleRequirements)
    flags: RoleFlags = Field(default_factory=RoleFlags)


class CompensationData(_Blob):
    rate_type: str = ""
    amount: float | None = None
    currency: str = "EUR"
    notes: str = ""


class Compensation(_Blob):
    by_role: dict[str, CompensationData] = {}


class PrescreenQuestion(_Blob):
    id: str
    question: str
    type: str = "text"


class Prescreens(_Blob):
    questions: list[PrescreenQuestion] = []
    media_requirements: list[str] = []
    audition_instructions: str = ""


class Materials(_Blob):
    media: list[str] = []
    texts: list[str] = []


class ProjectMeta(_Blob):
    created_at: str | None = None
    updated_at: str | None = None
    last_saved_by: str = ""


class Project(_Blob):
    """The whole aggregate as the wizard edits it and the API returns it."""

    id: str | None = None
    title: str = ""
    project_type: str = Field(default="", alias="type")
    description: str = ""
    location: str | None = None
    union_status: str = ""
    dates_and_locations: str = ""
    hire_from: str = ""
    has_special_instructions: bool = False
    special_instructions: str = ""
    materials: Materials = Field(default_factory=Materials)
    roles: list[Role] = []
    compensation: Compensation = Field(default_factory=Compensation)
    prescreens: Prescreens = Field(default_factory=Prescreens)
    meta: ProjectMeta = Field(default_factory=ProjectMeta)
    status: ProjectStatus = "draft"
    version: int | None = None
    owner_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def role_ids(self) -> list[str]:
        return [role.id for role in self.roles if role.id]


def is_server_id(value: str | None) -> bool:
    """Server-assigned ids are UUIDs; anything else came from a client."""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def normalize_roles(
    roles: list[Role], compensation: Compensation
) -> tuple[list[Role], Compensation, dict[str, str]]:
    """
    Give every role a server id and re-key compensation to match.

    Roles whose id is missing or temporary get a fresh UUID. Compensation
    entries follow their role to the new id; entries whose role is gone are
    dropped, so there is at most one compensation record per existing role.

    Returns:
        (roles, compensation, {temporary_id: server_id})
    """
    id_map: dict[str, str] = {}
    normalized: list[Role] = []
    seen: set[str] = set()

    for role in roles:
        role_id = role.id
        if not is_server_id(role_id):
            new_id = str(uuid.uuid4())
            if role_id:
                id_map[role_id] = new_id
            role_id = new_id
        elif role_id in seen:
            role_id = str(uuid.uuid4())
        seen.add(role_id)
        normalized.append(role.model_copy(update={"id": role_id}))

    by_role: dict[str, CompensationData] = {}
    for key, data in compensation.by_role.items():
        target = id_map.get(key, key)
        if target in seen and target not in by_role:
            by_role[target] = data

    return normalized, Compensation(by_role=by_role), id_map


class PublishedCasting(BaseModel):
    """A published project joined with its producer's public details."""

    project: Project
    producer_id: str | None = None
    company_name: str | None = None
    producer_location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
