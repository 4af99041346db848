"""Feedback and user report routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from olofalumni.api.deps import get_current_user
from olofalumni.contracts.enums import FeedbackType, NotificationType, ReportReason
from olofalumni.contracts.models import FeedbackOut, ReportOut
from olofalumni.db.repos import FeedbackRepo, ReportRepo, UserRepo
from olofalumni.db.session import db_session
from olofalumni.db.types import MAX_PAGE_SIZE, PaginationParams
from olofalumni.events import publish_event
from olofalumni.events.constants import EVENT_FEEDBACK_SUBMITTED, EVENT_USER_REPORTED
from olofalumni.services.notifications import notify_all

logger = logging.getLogger(__name__)

feedback_router = APIRouter(prefix="/api/feedback", tags=["feedback"])
reports_router = APIRouter(prefix="/api/reports", tags=["reports"])

DEFAULT_FEEDBACK_LIMIT = 10


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class FeedbackRequest(BaseModel):
    """Request to submit feedback."""

    type: FeedbackType
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=10)
    rating: int | None = Field(None, ge=1, le=5)

    model_config = {"extra": "forbid"}

    strip_subject = field_validator("subject")(_strip_required)


class LikeResponse(BaseModel):
    """Like state after a toggle."""

    liked: bool
    likes: int


class ReportRequest(BaseModel):
    """Request to report another member."""

    reported_user_id: str = Field(min_length=1)
    reason: ReportReason
    description: str = Field(min_length=10)

    model_config = {"extra": "forbid"}


@feedback_router.post("", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    request: FeedbackRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> FeedbackOut:
    """Store feedback and announce it to the community."""
    async with db_session() as session:
        entry = await FeedbackRepo(session).create_feedback(
            user_id=current_user["id"],
            feedback_type=request.type.value,
            subject=request.subject,
            message=request.message.strip(),
            rating=request.rating,
        )
        await session.commit()

    logger.info(f"Feedback {entry['id']} ({request.type.value}) from user {current_user['id']}")

    await notify_all(
        NotificationType.NEW_FEEDBACK,
        "New Feedback Received",
        f"{current_user['name']} submitted {request.type.value} feedback: {request.subject}",
        related_user_id=current_user["id"],
    )
    await publish_event(
        EVENT_FEEDBACK_SUBMITTED,
        actor_id=current_user["id"],
        entity_id=entry["id"],
        payload={"type": request.type.value, "rating": request.rating},
    )
    return FeedbackOut.model_validate(entry)


@feedback_router.get("", response_model=list[FeedbackOut])
async def list_feedback(
    limit: int = Query(DEFAULT_FEEDBACK_LIMIT, ge=1, le=MAX_PAGE_SIZE),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> list[FeedbackOut]:
    """Latest feedback first."""
    async with db_session() as session:
        rows = await FeedbackRepo(session).list_feedback(PaginationParams(limit=limit))
    return [FeedbackOut.model_validate(row) for row in rows]


@feedback_router.post("/{feedback_id}/like", response_model=LikeResponse)
async def toggle_feedback_like(
    feedback_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> LikeResponse:
    """Toggle the caller's like on a feedback entry."""
    async with db_session() as session:
        repo = FeedbackRepo(session)
        if await repo.get_by_id(feedback_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feedback not found")
        liked, likes = await repo.toggle_like(feedback_id, current_user["id"])
        await session.commit()
    return LikeResponse(liked=liked, likes=likes)


@reports_router.post("", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
async def report_user(
    request: ReportRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ReportOut:
    """Report another member for moderation."""
    if request.reported_user_id == current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot report yourself",
        )

    async with db_session() as session:
        reported = await UserRepo(session).get_by_id(request.reported_user_id)
        if reported is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        report = await ReportRepo(session).create_report(
            reporter_id=current_user["id"],
            reported_user_id=request.reported_user_id,
            reason=request.reason.value,
            description=request.description.strip(),
        )
        await session.commit()

    logger.warning(
        f"User {current_user['id']} reported {request.reported_user_id} for {request.reason.value!r}"
    )

    await notify_all(
        NotificationType.USER_REPORTED,
        "User Reported",
        f"A user has been reported by {current_user['name']}. Reason: {request.reason.value}",
        related_user_id=request.reported_user_id,
    )
    await publish_event(
        EVENT_USER_REPORTED,
        actor_id=current_user["id"],
        entity_id=report["id"],
        payload={"reported_user_id": request.reported_user_id, "reason": request.reason.value},
    )
    return ReportOut.model_validate(report)


@reports_router.get("/mine", response_model=list[ReportOut])
async def my_reports(current_user: dict[str, Any] = Depends(get_current_user)) -> list[ReportOut]:
    """Reports the caller has filed."""
    async with db_session() as session:
        rows = await ReportRepo(session).list_by_reporter(current_user["id"])
    return [ReportOut.model_validate(row) for row in rows]
