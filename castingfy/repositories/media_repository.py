"""
Persistence for gallery images and talent reviews.
"""

from typing import Any

from psycopg import sql

from castingfy.db.helpers import execute_query, fetch_all, fetch_one, with_db_retry
from castingfy.db.pool import get_db_transaction
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.media_domain import GalleryImage
from castingfy.models.domain.review_domain import ANONYMOUS_REVIEWER, Review
from castingfy.repositories.base import RepositoryError, clean_row, row_to, rows_to

logger = get_logger(__name__)

GALLERY_UPDATABLE = ("title", "description", "display_order", "is_cover")


class GalleryRepository:
    SELECT_COLUMNS = (
        "id, user_id, image_url, title, description, display_order, is_cover, created_at"
    )
    UNSET_COVERS = """
        UPDATE gallery_images
        SET is_cover = false
        WHERE user_id = %s AND is_cover = true AND id IS DISTINCT FROM %s
    """

    @classmethod
    @with_db_retry()
    async def list_for_user(cls, user_id: str) -> list[GalleryImage]:
        query = f"""
            SELECT {cls.SELECT_COLUMNS}
            FROM gallery_images
            WHERE user_id = %s
            ORDER BY display_order ASC, created_at DESC
        """
        return rows_to(GalleryImage, await fetch_all(query, (user_id,)))

    @classmethod
    async def insert(
        cls,
        user_id: str,
        image_url: str,
        title: str | None,
        description: str | None,
        display_order: int,
        is_cover: bool,
    ) -> GalleryImage:
        """Insert an image; a new cover demotes the previous one in the same transaction."""
        query = f"""
            INSERT INTO gallery_images (user_id, image_url, title, description, display_order, is_cover)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {cls.SELECT_COLUMNS}
        """
        params = (user_id, image_url, title, description, display_order, is_cover)

        async with await get_db_transaction() as conn:
            if is_cover:
                await execute_query(cls.UNSET_COVERS, (user_id, None), connection=conn)
            row = await fetch_one(query, params, connection=conn)

        if not row:
            raise RepositoryError("Failed to add gallery image", operation="insert_gallery_image")

        logger.info("Gallery image added", user_id=user_id, image_id=str(row["id"]), is_cover=is_cover)
        return row_to(GalleryImage, row)

    @classmethod
    async def update(
        cls, user_id: str, image_id: str, values: dict[str, Any]
    ) -> GalleryImage | None:
        """Update the provided fields of one of the owner's images."""
        present = [column for column in GALLERY_UPDATABLE if column in values]
        if not present:
            query = f"SELECT {cls.SELECT_COLUMNS} FROM gallery_images WHERE id = %s AND user_id = %s"
            return row_to(GalleryImage, await fetch_one(query, (image_id, user_id)))

        query = sql.SQL(
            "UPDATE gallery_images SET {assignments} WHERE id = %s AND user_id = %s RETURNING {select}"
        ).format(
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(column)) for column in present
            ),
            select=sql.SQL(cls.SELECT_COLUMNS),
        )
        params = (*(values[column] for column in present), image_id, user_id)

        async with await get_db_transaction() as conn:
            if values.get("is_cover"):
                await execute_query(cls.UNSET_COVERS, (user_id, image_id), connection=conn)
            row = await fetch_one(query, params, connection=conn)

        return row_to(GalleryImage, row)

    @classmethod
    async def delete(cls, user_id: str, image_id: str) -> bool:
        deleted = await execute_query(
            "DELETE FROM gallery_images WHERE id = %s AND user_id = %s", (image_id, user_id)
        )
        return deleted > 0


class ReviewRepository:
    SELECT_COLUMNS = (
        "id, talent_user_id, reviewer_user_id, rating, review_text, project_name, created_at"
    )

    @classmethod
    @with_db_retry()
    async def list_for_talent(cls, talent_user_id: str) -> list[Review]:
        """Reviews newest first, named after the reviewer's company or email handle."""
        columns = ", ".join(f"r.{column.strip()}" for column in cls.SELECT_COLUMNS.split(","))
        query = f"""
            SELECT {columns},
                   pp.company_name AS reviewer_company,
                   u.email AS reviewer_email
            FROM talent_reviews r
            LEFT JOIN users u ON u.id = r.reviewer_user_id
            LEFT JOIN producer_profiles pp ON pp.user_id = r.reviewer_user_id
            WHERE r.talent_user_id = %s
            ORDER BY r.created_at DESC
        """
        rows = await fetch_all(query, (talent_user_id,))

        reviews = []
        for row in rows:
            row = clean_row(row)
            company = row.pop("reviewer_company")
            email = row.pop("reviewer_email")
            handle = email.split("@")[0] if email else ""
            row["reviewer_name"] = company or handle or ANONYMOUS_REVIEWER
            reviews.append(Review.model_validate(row))
        return reviews

    @classmethod
    async def insert(
        cls,
        talent_user_id: str,
        reviewer_user_id: str,
        rating: int,
        review_text: str,
        project_name: str | None,
    ) -> Review:
        """
        Raises:
            DatabaseError: sqlstate 23505 when the reviewer already reviewed the talent
        """
        query = f"""
            INSERT INTO talent_reviews (talent_user_id, reviewer_user_id, rating, review_text, project_name)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {cls.SELECT_COLUMNS}
        """
        row = await fetch_one(
            query, (talent_user_id, reviewer_user_id, rating, review_text, project_name)
        )
        if not row:
            raise RepositoryError("Failed to create review", operation="insert_review")

        logger.info("Review created", user_id=reviewer_user_id, talent_user_id=talent_user_id)
        return row_to(Review, row)

    @classmethod
    async def delete(cls, reviewer_user_id: str, review_id: str) -> bool:
        deleted = await execute_query(
            "DELETE FROM talent_reviews WHERE id = %s AND reviewer_user_id = %s",
            (review_id, reviewer_user_id),
        )
        return deleted > 0
