"""
Persistence for projects (castings).

Scalar fields live in their own columns; roles, compensation, prescreens,
materials and meta are JSONB blobs written with their camelCase keys.
Every write bumps `version` so clients can detect concurrent edits.
"""

from typing import Any

from psycopg import sql

from castingfy.db.helpers import as_json, execute_query, fetch_all, fetch_one, with_db_retry
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.project_domain import Project, PublishedCasting
from castingfy.repositories.base import RepositoryError, clean_row

logger = get_logger(__name__)

SCALAR_COLUMNS = (
    "title", "description", "project_type", "location", "union_status",
    "dates_and_locations", "hire_from", "has_special_instructions",
    "special_instructions", "status",
)
JSON_COLUMNS = ("materials", "roles", "compensation", "prescreens", "meta")
WRITABLE_COLUMNS = SCALAR_COLUMNS + JSON_COLUMNS


def project_to_columns(project: Project, fields: set[str] | None = None) -> dict[str, Any]:
    """
    Column values for a project, optionally limited to some model fields.

    Args:
        project: The aggregate to persist
        fields: Model field names to include (None = every writable column)
    """
    values: dict[str, Any] = {}
    for column in WRITABLE_COLUMNS:
        if fields is not None and column not in fields:
            continue
        value = getattr(project, column)
        if column in JSON_COLUMNS:
            if isinstance(value, list):
                value = as_json([item.model_dump(by_alias=True) for item in value])
            else:
                value = as_json(value.model_dump(by_alias=True))
        values[column] = value
    return values


class ProjectRepository:
    """projects table, always scoped to the owning producer."""

    SELECT_COLUMNS = (
        "id, user_id, " + ", ".join(WRITABLE_COLUMNS) + ", version, created_at, updated_at"
    )

    @classmethod
    def _row_to_project(cls, row: dict | None) -> Project | None:
        if not row:
            return None

        data = {key: value for key, value in clean_row(row).items() if value is not None}
        data["owner_id"] = data.pop("user_id", None)
        return Project.model_validate(data)

    @classmethod
    async def insert(cls, owner_id: str, values: dict[str, Any]) -> Project:
        """Insert a project row (version 1) and return it."""
        columns = list(values)
        query = sql.SQL(
            "INSERT INTO projects (user_id, {columns}, version) VALUES (%s, {marks}, 1) RETURNING {select}"
        ).format(
            columns=sql.SQL(", ").join(sql.Identifier(column) for column in columns),
            marks=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
            select=sql.SQL(cls.SELECT_COLUMNS),
        )

        row = await fetch_one(query, (owner_id, *values.values()))
        if not row:
            raise RepositoryError("Failed to create project", operation="insert_project")

        logger.info("Project created", user_id=owner_id, project_id=str(row["id"]))
        return cls._row_to_project(row)

    @classmethod
    async def update(
        cls,
        owner_id: str,
        project_id: str,
        values: dict[str, Any],
        expected_version: int | None = None,
    ) -> Project | None:
        """
        Apply the given column values and bump the version.

        Args:
            owner_id: Only the owner's row is touched
            project_id: Target project
            values: Column -> value for the provided fields only
            expected_version: When set, the row must still carry this version

        Returns:
            The updated project, or None when nothing matched (missing row,
            foreign owner or stale version)
        """
        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in values
        ]
        assignments.append(sql.SQL("version = COALESCE(version, 0) + 1"))
        assignments.append(sql.SQL("updated_at = NOW()"))

        query = sql.SQL(
            """
            UPDATE projects SET {assignments}
            WHERE id = %s AND user_id = %s
              AND (%s::int IS NULL OR version = %s)
            RETURNING {select}
            """
        ).format(
            assignments=sql.SQL(", ").join(assignments),
            select=sql.SQL(cls.SELECT_COLUMNS),
        )

        params = (*values.values(), project_id, owner_id, expected_version, expected_version)
        row = await fetch_one(query, params)
        if row:
            logger.info(
                "Project updated",
                user_id=owner_id,
                project_id=project_id,
                fields=sorted(values),
                version=row["version"],
            )
        return cls._row_to_project(row)

    @classmethod
    @with_db_retry()
    async def get(cls, owner_id: str, project_id: str) -> Project | None:
        query = f"SELECT {cls.SELECT_COLUMNS} FROM projects WHERE id = %s AND user_id = %s"
        return cls._row_to_project(await fetch_one(query, (project_id, owner_id)))

    @classmethod
    @with_db_retry()
    async def list_for_owner(cls, owner_id: str) -> list[Project]:
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM projects
            WHERE user_id = %s
            ORDER BY created_at DESC
        """
        rows = await fetch_all(query, (owner_id,))
        return [cls._row_to_project(row) for row in rows]

    @classmethod
    async def delete(cls, owner_id: str, project_id: str) -> bool:
        deleted = await execute_query(
            "DELETE FROM projects WHERE id = %s AND user_id = %s", (project_id, owner_id)
        )
        if deleted:
            logger.info("Project deleted", user_id=owner_id, project_id=project_id)
        return deleted > 0

    @classmethod
    @with_db_retry()
    async def list_published(cls) -> list[PublishedCasting]:
        """Published projects, newest first, with the producer's public details."""
        select = ", ".join(f"p.{column.strip()}" for column in cls.SELECT_COLUMNS.split(","))
        query = f"""
            SELECT {select},
                   p.start_date, p.end_date,
                   pp.company_name, pp.location AS producer_location
            FROM projects p
            JOIN producer_profiles pp ON pp.user_id = p.user_id
            WHERE p.status = 'published'
            ORDER BY p.created_at DESC
        """
        rows = await fetch_all(query)

        castings = []
        for row in rows:
            extra = {
                key: row.pop(key)
                for key in ("start_date", "end_date", "company_name", "producer_location")
            }
            project = cls._row_to_project(row)
            castings.append(PublishedCasting(project=project, producer_id=project.owner_id, **extra))
        return castings
