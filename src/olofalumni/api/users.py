"""Alumni directory and account settings routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError

from olofalumni.api.deps import get_current_user, has_file, store_upload
from olofalumni.contracts.enums import Gender
from olofalumni.contracts.models import UserPublic, UserSelf, public_user_view, self_user_view
from olofalumni.db.repos import UserRepo
from olofalumni.db.session import db_session

logger = logging.getLogger(__name__)

users_router = APIRouter(prefix="/api/users", tags=["users"])
settings_router = APIRouter(prefix="/api/user", tags=["users"])

_email_adapter = TypeAdapter(EmailStr)


class SettingsResponse(BaseModel):
    """Acknowledgement carrying the updated user."""

    message: str
    user: UserSelf


@users_router.get("", response_model=list[UserPublic], response_model_exclude_none=True)
async def list_users(
    year: int | None = Query(None),
    clan: str | None = Query(None),
    q: str | None = Query(None),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> list[UserPublic]:
    """Verified alumni ordered by name."""
    async with db_session() as session:
        rows = await UserRepo(session).list_verified(year=year, clan=clan, query=q)
    return [public_user_view(row, viewer_id=current_user["id"]) for row in rows]


@users_router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> UserPublic:
    """One alumni profile."""
    async with db_session() as session:
        row = await UserRepo(session).get_by_id(user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return public_user_view(row, viewer_id=current_user["id"])


@settings_router.get("/settings", response_model=UserSelf)
async def get_user_settings(current_user: dict[str, Any] = Depends(get_current_user)) -> UserSelf:
    """The caller's editable settings."""
    return self_user_view(current_user)


@settings_router.put("/settings", response_model=SettingsResponse)
async def update_user_settings(
    name: str = Form(...),
    email: str = Form(...),
    bio: str | None = Form(None),
    year_of_completion: int | None = Form(None, ge=1950, le=2100),
    stream_clan: str | None = Form(None),
    gender: Gender | None = Form(None),
    phone: str | None = Form(None, max_length=32),
    hide_email: bool | None = Form(None),
    hide_phone: bool | None = Form(None),
    profile_picture: UploadFile | None = File(None),
    cover_photo: UploadFile | None = File(None),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> SettingsResponse:
    """Update the caller's profile and privacy settings."""
    name = name.strip()
    if len(name) < 2:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name must be at least 2 characters",
        )
    try:
        email = _email_adapter.validate_python(email.strip()).lower()
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email address",
        ) from e

    updates: dict[str, Any] = {"name": name, "email": email}
    if bio is not None:
        updates["bio"] = bio.strip() or None
    if year_of_completion is not None:
        updates["year_of_completion"] = year_of_completion
    if stream_clan is not None and stream_clan.strip():
        updates["stream_clan"] = stream_clan.strip()
    if gender is not None:
        updates["gender"] = gender.value
    if phone is not None:
        updates["phone"] = phone.strip() or None
    if hide_email is not None:
        updates["hide_email"] = hide_email
    if hide_phone is not None:
        updates["hide_phone"] = hide_phone

    async with db_session() as session:
        repo = UserRepo(session)
        if await repo.email_taken_by_other(email, current_user["id"]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email is already used by another account",
            )

        if has_file(profile_picture):
            updates["profile_picture"] = (await store_upload(profile_picture, images_only=True)).url
        if has_file(cover_photo):
            updates["cover_photo"] = (await store_upload(cover_photo, images_only=True)).url

        user = await repo.update_user(current_user["id"], updates)
        await session.commit()

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info(f"User {user['id']} updated settings: {sorted(updates)}")
    return SettingsResponse(message="Settings updated successfully", user=self_user_view(user))
