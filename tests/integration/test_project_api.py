"""
Project endpoints end to end against an in-memory projects table.
"""

import uuid
from datetime import UTC, datetime

import pytest
from psycopg.types.json import Jsonb

from castingfy.models.domain.project_domain import Project, is_server_id
from castingfy.repositories.project_repository import ProjectRepository


class InMemoryProjects:
    """Column-level stand-in for ProjectRepository."""

    def __init__(self):
        self.rows: dict[str, dict] = {}

    def _project(self, row: dict) -> Project:
        data = {key: value for key, value in row.items() if value is not None}
        data["owner_id"] = data.pop("user_id")
        return Project.model_validate(data)

    @staticmethod
    def _plain(values: dict) -> dict:
        return {key: value.obj if isinstance(value, Jsonb) else value for key, value in values.items()}

    async def insert(self, owner_id, values):
        now = datetime.now(UTC)
        row = {
            "id": str(uuid.uuid4()),
            "user_id": owner_id,
            "version": 1,
            "created_at": now,
            "updated_at": now,
            **self._plain(values),
        }
        self.rows[row["id"]] = row
        return self._project(row)

    async def get(self, owner_id, project_id):
        row = self.rows.get(project_id)
        if not row or row["user_id"] != owner_id:
            return None
        return self._project(row)

    async def list_for_owner(self, owner_id):
        return [self._project(row) for row in self.rows.values() if row["user_id"] == owner_id]

    async def update(self, owner_id, project_id, values, expected_version=None):
        row = self.rows.get(project_id)
        if not row or row["user_id"] != owner_id:
            return None
        if expected_version is not None and row["version"] != expected_version:
            return None
        row.update(self._plain(values))
        row["version"] += 1
        row["updated_at"] = datetime.now(UTC)
        return self._project(row)

    async def delete(self, owner_id, project_id):
        row = self.rows.get(project_id)
        if not row or row["user_id"] != owner_id:
            return False
        del self.rows[project_id]
        return True


@pytest.fixture
def projects(monkeypatch):
    table = InMemoryProjects()
    for name in ("insert", "get", "list_for_owner", "update", "delete"):
        monkeypatch.setattr(ProjectRepository, name, getattr(table, name))
    return table


def test_create_then_save_roles_assigns_server_ids(client, login, projects):
    login("producer-1")

    created = client.post("/projects", json={"title": "Short Film A"})

    assert created.status_code == 201
    project = created.json()["project"]
    assert project["title"] == "Short Film A"
    assert project["roles"] == []
    assert project["status"] == "draft"
    assert project["version"] == 1

    fetched = client.get(f"/projects/{project['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["project"]["title"] == "Short Film A"
    assert fetched.json()["project"]["roles"] == []

    updated = client.patch(
        f"/projects/{project['id']}",
        json={
            "roles": [{"id": "tmp-1", "name": "Lead", "ageMin": 20, "ageMax": 35}],
            "compensation": {"byRole": {"tmp-1": {"rateType": "flat", "amount": 500}}},
            "version": 1,
        },
    )

    assert updated.status_code == 200
    saved = updated.json()["project"]
    role_id = saved["roles"][0]["id"]
    assert role_id != "tmp-1"
    assert is_server_id(role_id)
    assert saved["roles"][0]["ageMin"] == 20
    assert list(saved["compensation"]["byRole"]) == [role_id]
    assert saved["version"] == 2

    persisted = client.get(f"/projects/{project['id']}").json()["project"]
    assert [role["id"] for role in persisted["roles"]] == [role_id]
    assert persisted["roles"][0]["name"] == "Lead"
    assert persisted["compensation"]["byRole"][role_id]["amount"] == 500
    assert persisted["version"] == 2


def test_stale_version_returns_409(client, login, projects):
    login("producer-1")
    project = client.post("/projects", json={"title": "Short Film A"}).json()["project"]
    client.patch(f"/projects/{project['id']}", json={"description": "v2"})

    response = client.patch(f"/projects/{project['id']}", json={"title": "B", "version": 1})

    assert response.status_code == 409
    assert "error" in response.json()


def test_create_without_title_returns_400(client, login, projects):
    login("producer-1")

    response = client.post("/projects", json={"description": "No title"})

    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}


def test_other_producers_project_is_404(client, login, projects):
    login("producer-1")
    project = client.post("/projects", json={"title": "Short Film A"}).json()["project"]

    login("producer-2")
    response = client.get(f"/projects/{project['id']}")

    assert response.status_code == 404
    assert response.json() == {"error": "Project not found"}


def test_publish_then_delete(client, login, projects):
    login("producer-1")
    project = client.post(
        "/projects", json={"title": "Short Film A", "roles": [{"name": "Lead"}]}
    ).json()["project"]

    published = client.post(f"/projects/{project['id']}/publish")
    assert published.status_code == 200
    assert published.json()["project"]["status"] == "published"

    deleted = client.delete(f"/projects/{project['id']}")
    assert deleted.json() == {"success": True}
    assert client.get("/projects").json() == {"projects": []}


def test_projects_require_authentication(client, projects):
    response = client.get("/projects")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_whitespace_title_is_rejected(client, login, projects):
    login("producer-1")

    response = client.post("/projects", json={"title": "   "})

    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
