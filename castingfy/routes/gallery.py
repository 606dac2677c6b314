"""
gallery.py
----------
Purpose:
    Talent gallery images and the image upload endpoint that feeds them.

Usage:
    1. POST /upload (multipart: file, folder) - store an image, get its URL
    2. POST /gallery - add the URL to the caller's gallery
    3. PATCH /gallery - edit title/description/order/cover
    4. DELETE /gallery?imageId= - remove
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.config import settings
from castingfy.models.api.media_models import (
    GalleryImageCreateRequest,
    GalleryImageResponse,
    GalleryImageUpdateRequest,
    GalleryListResponse,
    UploadResponse,
)
from castingfy.models.api.network_models import SuccessResponse
from castingfy.services import gallery_service, storage_service

router = APIRouter(tags=["gallery"])


@router.get("/gallery", response_model=GalleryListResponse)
async def list_images(user_id: str | None = Query(default=None, alias="userId")):
    images = await gallery_service.list_images(user_id)
    return GalleryListResponse(images=images)


@router.post("/gallery", response_model=GalleryImageResponse, status_code=201)
async def add_image(request: GalleryImageCreateRequest, ctx: AuthContext = Depends(get_auth_context)):
    image = await gallery_service.add_image(ctx, request)
    return GalleryImageResponse(image=image)


@router.patch("/gallery", response_model=GalleryImageResponse)
async def update_image(request: GalleryImageUpdateRequest, ctx: AuthContext = Depends(get_auth_context)):
    image = await gallery_service.update_image(ctx, request)
    return GalleryImageResponse(image=image)


@router.delete("/gallery", response_model=SuccessResponse)
async def delete_image(
    image_id: str | None = Query(default=None, alias="imageId"),
    ctx: AuthContext = Depends(get_auth_context),
):
    await gallery_service.delete_image(ctx, image_id)
    return SuccessResponse()


@router.post("/upload", response_model=UploadResponse)
async def upload(
    file: UploadFile = File(...),
    folder: str = Form(default=storage_service.DEFAULT_FOLDER),
    ctx: AuthContext = Depends(get_auth_context),
):
    """
    Raises:
        400: not an image or larger than the upload limit
        500: storage failure
    """
    # One byte past the limit is enough to reject oversized files.
    data = await file.read(settings.UPLOAD_MAX_BYTES + 1)
    stored = await storage_service.upload_file(
        ctx,
        filename=file.filename or "",
        content_type=file.content_type,
        data=data,
        folder=folder,
    )
    return UploadResponse(url=stored.url, path=stored.path)
