from datetime import datetime

from pydantic import BaseModel


class GalleryImage(BaseModel):
    id: str
    user_id: str
    image_url: str
    title: str | None = None
    description: str | None = None
    display_order: int = 0
    is_cover: bool = False
    created_at: datetime | None = None


class StoredObject(BaseModel):
    """An uploaded file in the storage bucket."""

    path: str
    url: str
