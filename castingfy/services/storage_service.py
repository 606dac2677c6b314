"""
Uploads to Supabase Storage.

Files go through the Storage REST API with the service role key, into
`{folder}/{user_id}-{epoch_ms}.{ext}` of the configured bucket, and are
served from the bucket's public URL.
"""

import time

import httpx

from castingfy.auth.verify import AuthContext
from castingfy.config import settings
from castingfy.infrastructure.observability.logging import get_logger
from castingfy.models.domain.media_domain import StoredObject
from castingfy.services.errors import UpstreamError, ValidationError

logger = get_logger(__name__)

DEFAULT_FOLDER = "uploads"


def clean_folder(folder: str | None) -> str:
    folder = (folder or DEFAULT_FOLDER).strip().strip("/")
    if not folder:
        return DEFAULT_FOLDER
    if ".." in folder.split("/"):
        raise ValidationError("Invalid folder")
    return folder


def build_object_path(folder: str, user_id: str, filename: str, epoch_ms: int) -> str:
    name = filename or ""
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    extension = extension or "bin"
    return f"{folder}/{user_id}-{epoch_ms}.{extension}"


def validate_upload(content_type: str | None, size: int) -> None:
    """
    Raises:
        ValidationError: not an allowed image type or larger than the limit
    """
    if content_type not in settings.UPLOAD_ALLOWED_TYPES:
        raise ValidationError("Invalid file type. Only images are allowed.")
    if size > settings.UPLOAD_MAX_BYTES:
        limit_mb = settings.UPLOAD_MAX_BYTES // (1024 * 1024)
        raise ValidationError(f"File too large. Maximum size is {limit_mb}MB.")


async def upload_file(
    ctx: AuthContext,
    filename: str,
    content_type: str | None,
    data: bytes,
    folder: str | None = None,
) -> StoredObject:
    """
    Validate and store one image for the caller.

    Raises:
        ValidationError: see validate_upload
        UpstreamError: storage rejected the upload or could not be reached
    """
    validate_upload(content_type, len(data))
    path = build_object_path(clean_folder(folder), ctx.user_id, filename, int(time.time() * 1000))

    url = f"{settings.storage_base_url()}/object/{settings.SUPABASE_STORAGE_BUCKET}/{path}"
    headers = {
        "Authorization": f"Bearer {settings.SUPABASE_SERVICE_ROLE_KEY}",
        "apikey": settings.SUPABASE_SERVICE_ROLE_KEY,
        "Content-Type": content_type,
        "x-upsert": "false",
    }

    try:
        async with httpx.AsyncClient(timeout=settings.STORAGE_TIMEOUT_SECONDS) as client:
            response = await client.post(url, content=data, headers=headers)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(
            "Storage upload rejected",
            user_id=ctx.user_id,
            path=path,
            status_code=e.response.status_code,
            body=e.response.text[:200],
        )
        raise UpstreamError(f"Upload failed: {e.response.text[:200]}", user_id=ctx.user_id) from e
    except httpx.HTTPError as e:
        logger.error("Storage upload failed", user_id=ctx.user_id, path=path, error=str(e))
        raise UpstreamError(f"Upload failed: {e}", user_id=ctx.user_id) from e

    logger.info("File uploaded", user_id=ctx.user_id, path=path, size=len(data))
    return StoredObject(path=path, url=settings.public_object_url(path))
