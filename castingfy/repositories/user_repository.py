"""
Persistence for users and their role profiles.

A user has at most one profile: a talent_profiles row for talent and a
producer_profiles row for producers. Both tables are keyed by user_id.
"""

from typing import Any

from psycopg import sql

from castingfy.db.helpers import fetch_all, fetch_one, with_db_retry
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.user_domain import ProducerProfile, TalentProfile, User, UserSummary
from castingfy.repositories.base import RepositoryError, row_to, rows_to

logger = get_logger(__name__)

TALENT_COLUMNS = (
    "stage_name", "bio", "location", "age", "gender", "height", "headshot_url",
    "cover_image_url", "reel_url", "instagram_url", "imdb_url", "languages",
    "skills", "availability",
)
PRODUCER_COLUMNS = (
    "company_name", "bio", "location", "headshot_url", "project_types", "website",
    "credits", "instagram_url", "imdb_url",
)


class UserRepository:
    """users table."""

    SELECT_COLUMNS = "id, email, role, status, country, postal_code, created_at, updated_at"

    @classmethod
    def _row_to_user(cls, row: dict | None) -> User | None:
        return row_to(User, row)

    @classmethod
    @with_db_retry()
    async def get_user(cls, user_id: str) -> User | None:
        query = f"SELECT {cls.SELECT_COLUMNS} FROM users WHERE id = %s"
        return cls._row_to_user(await fetch_one(query, (user_id,)))

    @classmethod
    async def create_user(
        cls,
        user_id: str,
        email: str,
        role: str,
        status: str,
        country: str | None = None,
        postal_code: str | None = None,
    ) -> User:
        """
        Insert the users row for an authenticated identity.

        Raises:
            DatabaseError: sqlstate 23505 when the row already exists
        """
        query = f"""
            INSERT INTO users (id, email, role, status, country, postal_code)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {cls.SELECT_COLUMNS}
        """
        row = await fetch_one(query, (user_id, email, role, status, country, postal_code))
        if not row:
            raise RepositoryError("Failed to create user", operation="create_user")

        logger.info("User row created", user_id=user_id, role=role, status=status)
        return cls._row_to_user(row)

    @classmethod
    @with_db_retry()
    async def list_verified_users(
        cls, exclude_user_id: str, role: str | None, limit: int
    ) -> list[User]:
        """Verified accounts other than the caller, newest first."""
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM users
            WHERE status = 'verified'
              AND id <> %s
              AND (%s::text IS NULL OR role = %s)
            ORDER BY created_at DESC
            LIMIT %s
        """
        rows = await fetch_all(query, (exclude_user_id, role, role, limit))
        return rows_to(User, rows)


class ProfileRepository:
    """talent_profiles and producer_profiles tables."""

    TALENT_SELECT = "id, user_id, " + ", ".join(TALENT_COLUMNS) + ", created_at, updated_at"
    PRODUCER_SELECT = "id, user_id, " + ", ".join(PRODUCER_COLUMNS) + ", created_at, updated_at"

    @classmethod
    @with_db_retry()
    async def get_talent_profile(cls, user_id: str) -> TalentProfile | None:
        query = f"SELECT {cls.TALENT_SELECT} FROM talent_profiles WHERE user_id = %s"
        return row_to(TalentProfile, await fetch_one(query, (user_id,)))

    @classmethod
    @with_db_retry()
    async def get_producer_profile(cls, user_id: str) -> ProducerProfile | None:
        query = f"SELECT {cls.PRODUCER_SELECT} FROM producer_profiles WHERE user_id = %s"
        return row_to(ProducerProfile, await fetch_one(query, (user_id,)))

    @classmethod
    async def get_profile_for(cls, user: User) -> TalentProfile | ProducerProfile | None:
        """The profile matching the user's role."""
        if user.role == "producer":
            return await cls.get_producer_profile(user.id)
        return await cls.get_talent_profile(user.id)

    @classmethod
    async def get_summary(cls, user_id: str) -> UserSummary:
        """Display summary for any user id; unknown ids fall back to the bare id."""
        user = await UserRepository.get_user(user_id)
        profile = await cls.get_profile_for(user) if user else None
        return UserSummary.build(user, profile, user_id)

    @classmethod
    async def _insert(
        cls, table: str, columns: tuple[str, ...], select: str, user_id: str, values: dict[str, Any]
    ) -> dict:
        present = [column for column in columns if column in values]
        query = sql.SQL("INSERT INTO {table} (user_id, {columns}) VALUES (%s, {marks}) RETURNING {select}").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(sql.Identifier(column) for column in present),
            marks=sql.SQL(", ").join(sql.Placeholder() for _ in present),
            select=sql.SQL(select),
        )
        row = await fetch_one(query, (user_id, *(values[column] for column in present)))
        if not row:
            raise RepositoryError(f"Failed to insert into {table}", operation="create_profile")
        return row

    @classmethod
    async def _update(
        cls, table: str, columns: tuple[str, ...], select: str, user_id: str, values: dict[str, Any]
    ) -> dict | None:
        present = [column for column in columns if column in values]
        if not present:
            return await fetch_one(
                sql.SQL("SELECT {select} FROM {table} WHERE user_id = %s").format(
                    select=sql.SQL(select), table=sql.Identifier(table)
                ),
                (user_id,),
            )
        query = sql.SQL(
            "UPDATE {table} SET {assignments}, updated_at = NOW() WHERE user_id = %s RETURNING {select}"
        ).format(
            table=sql.Identifier(table),
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(column)) for column in present
            ),
            select=sql.SQL(select),
        )
        return await fetch_one(query, (*(values[column] for column in present), user_id))

    @classmethod
    async def create_talent_profile(cls, user_id: str, values: dict[str, Any]) -> TalentProfile:
        row = await cls._insert("talent_profiles", TALENT_COLUMNS, cls.TALENT_SELECT, user_id, values)
        logger.info("Talent profile created", user_id=user_id)
        return row_to(TalentProfile, row)

    @classmethod
    async def create_producer_profile(cls, user_id: str, values: dict[str, Any]) -> ProducerProfile:
        row = await cls._insert(
            "producer_profiles", PRODUCER_COLUMNS, cls.PRODUCER_SELECT, user_id, values
        )
        logger.info("Producer profile created", user_id=user_id)
        return row_to(ProducerProfile, row)

    @classmethod
    async def update_talent_profile(cls, user_id: str, values: dict[str, Any]) -> TalentProfile | None:
        row = await cls._update("talent_profiles", TALENT_COLUMNS, cls.TALENT_SELECT, user_id, values)
        return row_to(TalentProfile, row)

    @classmethod
    async def update_producer_profile(
        cls, user_id: str, values: dict[str, Any]
    ) -> ProducerProfile | None:
        row = await cls._update(
            "producer_profiles", PRODUCER_COLUMNS, cls.PRODUCER_SELECT, user_id, values
        )
        return row_to(ProducerProfile, row)

    @classmethod
    @with_db_retry()
    async def list_recent_talents(cls, limit: int) -> list[TalentProfile]:
        """Latest talent profiles that have a headshot."""
        query = f"""
            SELECT {cls.TALENT_SELECT}
            FROM talent_profiles
            WHERE headshot_url IS NOT NULL
            ORDER BY created_at DESC
            LIMIT %s
        """
        return rows_to(TalentProfile, await fetch_all(query, (limit,)))

