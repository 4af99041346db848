"""Shared photo gallery routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel

from olofalumni.api.deps import get_current_user, has_file, store_upload
from olofalumni.contracts.enums import NotificationType
from olofalumni.contracts.models import PhotoOut
from olofalumni.core.uploads import remove_upload
from olofalumni.db.repos import GalleryRepo
from olofalumni.db.session import db_session
from olofalumni.events import publish_event
from olofalumni.events.constants import EVENT_PHOTO_SHARED
from olofalumni.services.notifications import notify_all

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/gallery", tags=["gallery"])

GALLERY_SUBDIR = "gallery"


class DeletedResponse(BaseModel):
    """Acknowledgement of a delete."""

    message: str


@router.get("", response_model=list[PhotoOut])
async def list_photos(current_user: dict[str, Any] = Depends(get_current_user)) -> list[PhotoOut]:
    """All photos, newest first."""
    async with db_session() as session:
        photos = await GalleryRepo(session).list_photos()
    return [PhotoOut.model_validate(photo) for photo in photos]


@router.post("", response_model=PhotoOut, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    file: UploadFile | None = File(None),
    caption: str | None = Form(None),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> PhotoOut:
    """Add an image to the gallery."""
    if not has_file(file):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    stored = await store_upload(file, GALLERY_SUBDIR, images_only=True, keep_original_name=True)

    async with db_session() as session:
        photo = await GalleryRepo(session).create_photo(
            user_id=current_user["id"],
            filename=stored.filename,
            original_name=stored.original_name,
            mime_type=stored.mime_type,
            size=stored.size,
            caption=(caption or "").strip() or None,
        )
        await session.commit()

    logger.info(f"User {current_user['id']} uploaded photo {photo['id']} ({stored.size} bytes)")

    await notify_all(
        NotificationType.NEW_PHOTO,
        "New Photo Shared",
        f"{current_user['name']} shared a new photo in the gallery",
        related_user_id=current_user["id"],
    )
    await publish_event(
        EVENT_PHOTO_SHARED,
        actor_id=current_user["id"],
        entity_id=photo["id"],
        payload={"filename": stored.filename},
    )
    return PhotoOut.model_validate(photo)


@router.delete("/{photo_id}", response_model=DeletedResponse)
async def delete_photo(
    photo_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> DeletedResponse:
    """Remove one of the caller's photos and its file."""
    async with db_session() as session:
        photo = await GalleryRepo(session).delete_photo(photo_id, current_user["id"])
        if photo is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
        await session.commit()

    remove_upload(f"/uploads/{GALLERY_SUBDIR}/{photo['filename']}")
    return DeletedResponse(message="Photo deleted successfully")
