# castingfy/models/api/media_models.py
"""Request and response bodies for gallery, uploads, reviews and the Instagram feed."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from castingfy.models.domain.media_domain import GalleryImage
from castingfy.models.domain.review_domain import Review


class GalleryImageCreateRequest(BaseModel):
    image_url: str | None = None
    title: str | None = None
    description: str | None = None
    display_order: int | None = None
    is_cover: bool | None = None


class GalleryImageUpdateRequest(BaseModel):
    """Only the fields present in the body are written."""

    model_config = ConfigDict(populate_by_name=True)

    image_id: str | None = Field(default=None, alias="imageId")
    title: str | None = None
    description: str | None = None
    display_order: int | None = None
    is_cover: bool | None = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"image_id"})


class GalleryListResponse(BaseModel):
    images: list[GalleryImage]


class GalleryImageResponse(BaseModel):
    image: GalleryImage


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    path: str


class ReviewCreateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    talent_user_id: str | None = None
    rating: int | None = None
    review_text: str | None = None
    project_name: str | None = None


class ReviewListResponse(BaseModel):
    reviews: list[Review]


class ReviewResponse(BaseModel):
    review: Review


class InstagramPhoto(BaseModel):
    id: str
    thumbnail: str
    url: str


class InstagramFeedResponse(BaseModel):
    success: bool
    photos: list[InstagramPhoto] = []
    username: str | None = None
    error: str | None = None
