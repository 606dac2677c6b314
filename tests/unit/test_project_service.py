import uuid
from unittest.mock import AsyncMock

import pytest

from castingfy.auth.verify import AuthContext
from castingfy.models.api.project_request import ProjectPayload
from castingfy.models.domain.project_domain import Project, Role
from castingfy.services import project_service
from castingfy.services.errors import ConflictError, NotFoundError, ValidationError

CTX = AuthContext(user_id="producer-1")


def _project(**overrides) -> Project:
    data = {"id": str(uuid.uuid4()), "title": "Short Film A", "version": 3, "owner_id": "producer-1"}
    data.update(overrides)
    return Project(**data)


@pytest.mark.asyncio
async def test_create_requires_title():
    with pytest.raises(ValidationError, match="Title is required"):
        await project_service.create_project(CTX, ProjectPayload(description="no title"))


@pytest.mark.asyncio
async def test_stale_version_is_a_conflict(monkeypatch):
    update = AsyncMock()
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.get", AsyncMock(return_value=_project())
    )
    monkeypatch.setattr("castingfy.services.project_service.ProjectRepository.update", update)

    with pytest.raises(ConflictError):
        await project_service.update_project(CTX, "p-1", ProjectPayload(title="B", version=2))

    update.assert_not_awaited()


@pytest.mark.asyncio
async def test_lost_race_on_version_is_a_conflict(monkeypatch):
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.get", AsyncMock(return_value=_project())
    )
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.update", AsyncMock(return_value=None)
    )

    with pytest.raises(ConflictError):
        await project_service.update_project(CTX, "p-1", ProjectPayload(title="B", version=3))


@pytest.mark.asyncio
async def test_update_of_foreign_project_is_not_found(monkeypatch):
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.get", AsyncMock(return_value=None)
    )

    with pytest.raises(NotFoundError):
        await project_service.update_project(CTX, "p-1", ProjectPayload(title="B"))


@pytest.mark.asyncio
async def test_update_writes_only_provided_fields(monkeypatch):
    current = _project()
    update = AsyncMock(return_value=current)
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.get", AsyncMock(return_value=current)
    )
    monkeypatch.setattr("castingfy.services.project_service.ProjectRepository.update", update)

    await project_service.update_project(CTX, current.id, ProjectPayload(description="New pitch"))

    _, _, values = update.await_args.args
    assert values == {"description": "New pitch"}
    assert update.await_args.kwargs == {"expected_version": None}


@pytest.mark.asyncio
async def test_roles_update_also_writes_compensation(monkeypatch):
    current = _project()
    update = AsyncMock(return_value=current)
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.get", AsyncMock(return_value=current)
    )
    monkeypatch.setattr("castingfy.services.project_service.ProjectRepository.update", update)

    await project_service.update_project(
        CTX, current.id, ProjectPayload(roles=[Role(id="tmp-1", name="Lead")])
    )

    _, _, values = update.await_args.args
    assert set(values) == {"roles", "compensation"}
    written = values["roles"].obj
    assert written[0]["id"] != "tmp-1"


@pytest.mark.asyncio
async def test_publish_requires_roles(monkeypatch):
    monkeypatch.setattr(
        "castingfy.services.project_service.ProjectRepository.get", AsyncMock(return_value=_project())
    )

    with pytest.raises(ValidationError, match="role"):
        await project_service.publish_project(CTX, "p-1")
