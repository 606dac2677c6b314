"""Shared row conversion for repositories."""

import uuid
from typing import Any, TypeVar

from pydantic import BaseModel

from castingfy.db.helpers import DatabaseError

M = TypeVar("M", bound=BaseModel)


class RepositoryError(DatabaseError):
    """More specific exception for repository failures."""


def clean_row(row: dict[str, Any]) -> dict[str, Any]:
    """UUID columns come back as uuid.UUID; the domain speaks strings."""
    return {key: str(value) if isinstance(value, uuid.UUID) else value for key, value in row.items()}


def row_to(model: type[M], row: dict[str, Any] | None) -> M | None:
    if not row:
        return None
    return model.model_validate(clean_row(row))


def rows_to(model: type[M], rows: list[dict[str, Any]]) -> list[M]:
    return [model.model_validate(clean_row(row)) for row in rows]
