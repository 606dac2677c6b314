# castingfy/models/api/project_request.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from castingfy.models.domain.project_domain import (
    Compensation,
    Materials,
    Prescreens,
    ProjectMeta,
    Role,
)


class ProjectPayload(BaseModel):
    """
    Body of POST /projects and PATCH /projects/{id}.

    Every field is optional; on update only the fields present in the body
    are written. `version`, when sent, must match the stored version.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str | None = None
    project_type: str | None = Field(default=None, alias="type")
    description: str | None = None
    location: str | None = None
    union_status: str | None = None
    dates_and_locations: str | None = None
    hire_from: str | None = None
    has_special_instructions: bool | None = None
    special_instructions: str | None = None
    materials: Materials | None = None
    roles: list[Role] | None = None
    compensation: Compensation | None = None
    prescreens: Prescreens | None = None
    meta: ProjectMeta | None = None
    version: int | None = None

    def provided_fields(self) -> set[str]:
        """Fields explicitly sent by the client, excluding the version token."""
        return {name for name in self.model_fields_set if name != "version"}
