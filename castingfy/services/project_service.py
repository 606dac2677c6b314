"""
Project (casting) service.

Projects are edited as whole aggregates by the wizard: every save sends
the full project, the server assigns ids to new roles, keeps compensation
keyed by those ids and bumps the version.
"""

from castingfy.auth.verify import AuthContext
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.api.project_request import ProjectPayload
from castingfy.models.domain.project_domain import Project, PublishedCasting, normalize_roles
from castingfy.repositories.project_repository import ProjectRepository, project_to_columns
from castingfy.services.errors import ConflictError, NotFoundError, ValidationError

logger = get_logger(__name__)


def _apply_payload(project: Project, payload: ProjectPayload) -> tuple[Project, set[str]]:
    """Merge the provided, non-null payload fields into the project."""
    changes = {
        name: getattr(payload, name)
        for name in payload.provided_fields()
        if getattr(payload, name) is not None
    }
    merged = project.model_copy(update=changes)

    fields = set(changes)
    if fields & {"roles", "compensation"}:
        roles, compensation, id_map = normalize_roles(merged.roles, merged.compensation)
        merged = merged.model_copy(update={"roles": roles, "compensation": compensation})
        fields |= {"roles", "compensation"}
        if id_map:
            logger.info("Assigned server ids to new roles", project_id=project.id, count=len(id_map))
    return merged, fields


async def create_project(ctx: AuthContext, payload: ProjectPayload) -> Project:
    """
    Create a draft project owned by the caller.

    Raises:
        ValidationError: no title
    """
    if not (payload.title or "").strip():
        raise ValidationError("Title is required", user_id=ctx.user_id)

    project, _ = _apply_payload(Project(), payload)
    project = project.model_copy(update={"status": "draft"})

    created = await ProjectRepository.insert(ctx.user_id, project_to_columns(project))
    return created


async def get_project(ctx: AuthContext, project_id: str) -> Project:
    project = await ProjectRepository.get(ctx.user_id, project_id)
    if not project:
        raise NotFoundError("Project not found", user_id=ctx.user_id)
    return project


async def list_my_projects(ctx: AuthContext) -> list[Project]:
    return await ProjectRepository.list_for_owner(ctx.user_id)


async def update_project(ctx: AuthContext, project_id: str, payload: ProjectPayload) -> Project:
    """
    Write the provided fields of the payload.

    When the payload carries `version`, the update only applies if the
    stored project still has that version; otherwise the last write wins.

    Raises:
        NotFoundError: no such project for the caller
        ConflictError: the project changed since the client loaded `version`
    """
    current = await get_project(ctx, project_id)
    if payload.version is not None and current.version != payload.version:
        raise ConflictError("Project was modified by someone else", user_id=ctx.user_id)

    merged, fields = _apply_payload(current, payload)
    values = project_to_columns(merged, fields)

    updated = await ProjectRepository.update(
        ctx.user_id, project_id, values, expected_version=payload.version
    )
    if updated:
        return updated

    if payload.version is not None:
        raise ConflictError("Project was modified by someone else", user_id=ctx.user_id)
    raise NotFoundError("Project not found", user_id=ctx.user_id)


async def delete_project(ctx: AuthContext, project_id: str) -> None:
    if not await ProjectRepository.delete(ctx.user_id, project_id):
        raise NotFoundError("Project not found", user_id=ctx.user_id)


async def publish_project(ctx: AuthContext, project_id: str) -> Project:
    """
    Make a project visible on the casting board.

    Raises:
        ValidationError: missing title or no roles
    """
    project = await get_project(ctx, project_id)
    if not project.title.strip():
        raise ValidationError("Title is required to publish", user_id=ctx.user_id)
    if not project.roles:
        raise ValidationError("At least one role is required to publish", user_id=ctx.user_id)

    published = await ProjectRepository.update(ctx.user_id, project_id, {"status": "published"})
    if not published:
        raise NotFoundError("Project not found", user_id=ctx.user_id)

    logger.info("Project published", user_id=ctx.user_id, project_id=project_id)
    return published


async def list_published_castings() -> list[PublishedCasting]:
    return await ProjectRepository.list_published()


async def list_active_castings() -> list[PublishedCasting]:
    """Casting board feed; same rows as the public listing."""
    return await ProjectRepository.list_published()
