"""Notification inbox routes."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from olofalumni.api.deps import get_current_user
from olofalumni.contracts.models import NotificationOut
from olofalumni.db.repos import NotificationRepo
from olofalumni.db.session import db_session

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


class UnreadCountResponse(BaseModel):
    count: int


class MessageResponse(BaseModel):
    message: str


@router.get("", response_model=list[NotificationOut])
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> list[NotificationOut]:
    """The caller's notifications, newest first."""
    async with db_session() as session:
        rows = await NotificationRepo(session).list_for_user(current_user["id"], unread_only=unread_only)
    return [NotificationOut.model_validate(row) for row in rows]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(current_user: dict[str, Any] = Depends(get_current_user)) -> UnreadCountResponse:
    async with db_session() as session:
        count = await NotificationRepo(session).unread_count(current_user["id"])
    return UnreadCountResponse(count=count)


@router.patch("/mark-all-read", response_model=MessageResponse)
async def mark_all_read(current_user: dict[str, Any] = Depends(get_current_user)) -> MessageResponse:
    async with db_session(commit=True) as session:
        await NotificationRepo(session).mark_all_read(current_user["id"])
    return MessageResponse(message="All notifications marked as read")


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> MessageResponse:
    async with db_session(commit=True) as session:
        if not await NotificationRepo(session).mark_read(notification_id, current_user["id"]):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return MessageResponse(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> MessageResponse:
    async with db_session(commit=True) as session:
        if not await NotificationRepo(session).delete_for_user(notification_id, current_user["id"]):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return MessageResponse(message="Notification deleted")
