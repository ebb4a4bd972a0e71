"""Photo upload API endpoint."""

import logging
from typing import Annotated

import cloudinary.exceptions
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from src.api.dependencies import get_current_user, get_file_store
from src.models.user import User
from src.schemas.media import UploadResponse
from src.services.storage import FileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/uploads", tags=["uploads"])


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    file: Annotated[UploadFile, File(description="Bottle or label photo")],
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[FileStore, Depends(get_file_store)],
):
    """Upload a photo.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    if not store.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Photo storage is not configured",
        )

    # One byte past the limit is enough to reject an oversized file
    data = await file.read(store.max_bytes + 1)

    try:
        stored = store.save(data, file.content_type)
    except cloudinary.exceptions.Error as e:
        logger.error(f"Photo upload failed for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not store the photo",
        ) from e

    return UploadResponse(photo_url=stored.url, public_id=stored.public_id)
