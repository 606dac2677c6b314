"""
Project wizard state machine.

Drives the four-step authoring flow (details, roles, compensation,
prescreens) over a local copy of the project aggregate:

- Steps are gated: roles need a title, compensation and prescreens need
  at least one role. Going back is always allowed.
- Saves send the whole aggregate to a ProjectStore, create on the first
  save and update afterwards, and adopt the ids and version the server
  hands back. A failed save is reported, never rolled back locally.
- finish() publishes only after the final save succeeded.

Roles and prescreen questions created locally carry temporary `tmp-` ids
until the server replaces them.
"""

import inspect
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum
from typing import Any, Protocol

from castingfy.auth.verify import AuthContext
from castingfy.db.helpers import DatabaseError
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.api.project_request import ProjectPayload
from castingfy.models.domain.project_domain import (
    CompensationData,
    PrescreenQuestion,
    Project,
    Role,
)
from castingfy.services import project_service
from castingfy.services.errors import CastingfyError, ConflictError

logger = get_logger(__name__)

TEMP_ID_PREFIX = "tmp-"

# Fields a client may write; the server owns id, owner, status and timestamps.
EDITABLE_FIELDS = set(ProjectPayload.model_fields) - {"version"}


class WizardStep(IntEnum):
    DETAILS = 1
    ROLES = 2
    COMPENSATION = 3
    PRESCREENS = 4


class StepGateError(Exception):
    """Navigation to a step whose prerequisites are not met."""

    def __init__(self, step: WizardStep, reason: str):
        super().__init__(f"Cannot go to {step.name.lower()}: {reason}")
        self.step = step
        self.reason = reason


class WizardSaveError(Exception):
    """The final save failed, so the project was not published."""


@dataclass
class SaveResult:
    ok: bool
    project_id: str | None = None
    version: int | None = None
    error: str | None = None
    conflict: bool = False
    role_ids: dict[str, str] = field(default_factory=dict)


class ProjectStore(Protocol):
    async def create(self, payload: ProjectPayload) -> Project: ...

    async def update(self, project_id: str, payload: ProjectPayload) -> Project: ...

    async def publish(self, project_id: str) -> Project: ...


class ServiceProjectStore:
    """ProjectStore backed by the project service for one authenticated caller."""

    def __init__(self, ctx: AuthContext):
        self.ctx = ctx

    async def create(self, payload: ProjectPayload) -> Project:
        return await project_service.create_project(self.ctx, payload)

    async def update(self, project_id: str, payload: ProjectPayload) -> Project:
        return await project_service.update_project(self.ctx, project_id, payload)

    async def publish(self, project_id: str) -> Project:
        return await project_service.publish_project(self.ctx, project_id)


def temporary_id() -> str:
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def _now() -> str:
    return datetime.now(UTC).isoformat()


class ProjectWizard:
    """Client-side authoring session for one project."""

    def __init__(self, store: ProjectStore, project: Project | None = None, user_id: str = ""):
        self.store = store
        self.project = project or Project()
        self.user_id = user_id
        self.step = WizardStep.DETAILS
        self.last_save: SaveResult | None = None

    # -- navigation -----------------------------------------------------

    def can_proceed_to(self, step: WizardStep) -> bool:
        if step >= WizardStep.ROLES and not self.project.title.strip():
            return False
        if step >= WizardStep.COMPENSATION and not self.project.roles:
            return False
        return True

    def go_to(self, step: WizardStep) -> WizardStep:
        """
        Move to `step`.

        Raises:
            StepGateError: moving forward while the target's prerequisites fail
        """
        step = WizardStep(step)
        if step > self.step and not self.can_proceed_to(step):
            reason = "a title is required" if step == WizardStep.ROLES else "at least one role is required"
            raise StepGateError(step, reason)
        self.step = step
        return self.step

    # -- state ----------------------------------------------------------

    def _replace(self, **changes: Any) -> None:
        meta = self.project.meta.model_copy(update={"updated_at": _now(), "last_saved_by": self.user_id})
        if meta.created_at is None:
            meta = meta.model_copy(update={"created_at": meta.updated_at})
        data = self.project.model_dump()
        data.update(changes)
        data["meta"] = meta.model_dump()
        self.project = Project.model_validate(data)

    async def update(self, partial: dict[str, Any], callback: Callable[[Project], Any] | None = None) -> Project:
        """
        Merge a partial aggregate (field names, not wire aliases) into local state.

        The callback runs after the merge with the new project; awaitables
        it returns are awaited, which is how a save is sequenced behind an
        edit.
        """
        unknown = set(partial) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown project fields: {sorted(unknown)}")

        self._replace(**partial)
        if callback is not None:
            result = callback(self.project)
            if inspect.isawaitable(result):
                await result
        return self.project

    def _payload(self) -> ProjectPayload:
        data = self.project.model_dump(include=EDITABLE_FIELDS)
        data["version"] = self.project.version
        return ProjectPayload.model_validate(data)

    async def save(self) -> SaveResult:
        """
        Persist the whole aggregate.

        Never raises for store failures; the outcome is returned and kept
        in `last_save`.
        """
        local_role_ids = [role.id for role in self.project.roles]
        payload = self._payload()

        try:
            if self.project.id:
                saved = await self.store.update(self.project.id, payload)
            else:
                saved = await self.store.create(payload)
        except (CastingfyError, DatabaseError) as e:
            logger.warning(
                "Project save failed",
                project_id=self.project.id,
                user_id=self.user_id,
                error=str(e),
            )
            self.last_save = SaveResult(
                ok=False,
                project_id=self.project.id,
                version=self.project.version,
                error=getattr(e, "message", str(e)),
                conflict=isinstance(e, ConflictError),
            )
            return self.last_save

        role_ids = {
            local: role.id
            for local, role in zip(local_role_ids, saved.roles)
            if local and role.id and local != role.id
        }
        self.project = self.project.model_copy(
            update={
                "id": saved.id,
                "roles": saved.roles,
                "compensation": saved.compensation,
                "version": saved.version,
                "status": saved.status,
                "owner_id": saved.owner_id,
                "created_at": saved.created_at,
                "updated_at": saved.updated_at,
            }
        )
        self.last_save = SaveResult(
            ok=True, project_id=saved.id, version=saved.version, role_ids=role_ids
        )
        return self.last_save

    async def save_and_continue(self) -> SaveResult:
        """Save, then advance one step when the next step is reachable."""
        result = await self.save()
        if self.step < WizardStep.PRESCREENS:
            target = WizardStep(self.step + 1)
            if self.can_proceed_to(target):
                self.step = target
        return result

    async def finish(self) -> Project:
        """
        Final save followed by publish.

        Raises:
            WizardSaveError: the save failed; the project stays a draft
        """
        result = await self.save()
        if not result.ok:
            raise WizardSaveError(result.error or "Project could not be saved")

        published = await self.store.publish(self.project.id)
        self.project = self.project.model_copy(
            update={"status": published.status, "version": published.version}
        )
        logger.info("Project wizard finished", project_id=self.project.id, user_id=self.user_id)
        return self.project

    # -- roles ----------------------------------------------------------

    def _role_index(self, role_id: str) -> int:
        for index, role in enumerate(self.project.roles):
            if role.id == role_id:
                return index
        raise KeyError(role_id)

    def add_role(self, role: Role | None = None, **fields: Any) -> Role:
        role = role or Role.model_validate(fields)
        if not role.id:
            role = role.model_copy(update={"id": temporary_id()})
        self._replace(roles=[*self.project.roles, role])
        return role

    def update_role(self, role_id: str, **changes: Any) -> Role:
        index = self._role_index(role_id)
        roles = list(self.project.roles)
        data = roles[index].model_dump()
        data.update(changes)
        data["id"] = role_id
        roles[index] = Role.model_validate(data)
        self._replace(roles=roles)
        return roles[index]

    def remove_role(self, role_id: str) -> None:
        """Drop a role together with its compensation entry."""
        index = self._role_index(role_id)
        roles = [role for i, role in enumerate(self.project.roles) if i != index]
        by_role = {key: value for key, value in self.project.compensation.by_role.items() if key != role_id}
        self._replace(roles=roles, compensation={"by_role": by_role})

    def set_compensation(self, role_id: str, data: CompensationData | dict[str, Any]) -> None:
        self._role_index(role_id)
        data = CompensationData.model_validate(data)
        by_role = dict(self.project.compensation.by_role)
        by_role[role_id] = data
        self._replace(compensation={"by_role": by_role})

    # -- prescreens -----------------------------------------------------

    def add_prescreen_question(self, question: str, question_type: str = "text") -> PrescreenQuestion:
        entry = PrescreenQuestion(id=temporary_id(), question=question, type=question_type)
        prescreens = self.project.prescreens
        self._replace(
            prescreens=prescreens.model_copy(update={"questions": [*prescreens.questions, entry]})
        )
        return entry

    def remove_prescreen_question(self, question_id: str) -> None:
        prescreens = self.project.prescreens
        questions = [q for q in prescreens.questions if q.id != question_id]
        self._replace(prescreens=prescreens.model_copy(update={"questions": questions}))

    def set_media_requirements(self, media: list[str]) -> None:
        prescreens = self.project.prescreens
        self._replace(prescreens=prescreens.model_copy(update={"media_requirements": list(media)}))

    def set_audition_instructions(self, instructions: str) -> None:
        prescreens = self.project.prescreens
        self._replace(
            prescreens=prescreens.model_copy(update={"audition_instructions": instructions})
        )
