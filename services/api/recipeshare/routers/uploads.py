import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from ..deps import get_photo_store, require_user
from ..errors import ValidationError
from ..schemas import AuthUser, UploadOut
from ..services.photos import MAX_PHOTO_BYTES, PhotoStore

router = APIRouter()
logger = logging.getLogger("recipeshare.photos")


@router.post("/uploads", response_model=UploadOut)
async def upload_photo(
    photo: Optional[UploadFile] = File(None),
    user: AuthUser = Depends(require_user),
    store: PhotoStore = Depends(get_photo_store),
):
    """Store a single photo (multipart field "photo") and return its public URL."""
    if photo is None or not photo.filename:
        raise ValidationError("No file")

    # One byte past the limit is enough to know the upload is too large
    data = await photo.read(MAX_PHOTO_BYTES + 1)
    url = await run_in_threadpool(
        store.store, data, photo.filename, user.id, photo.content_type
    )
    logger.info(f"User {user.id} uploaded {photo.filename} -> {url}")
    return UploadOut(url=url)
