"""Community feed routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, Field, field_validator

from olofalumni.api.deps import get_current_user, has_file, store_upload
from olofalumni.contracts.enums import NotificationType, ReactionType
from olofalumni.contracts.models import CommentOut, PostOut
from olofalumni.core.uploads import remove_upload
from olofalumni.db.repos import CommentRepo, PostRepo
from olofalumni.db.session import db_session
from olofalumni.events import publish_event
from olofalumni.events.constants import EVENT_COMMENT_CREATED, EVENT_POST_CREATED
from olofalumni.services.notifications import notify_all

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


class ReactionRequest(BaseModel):
    """Request to toggle a reaction."""

    reaction: ReactionType

    model_config = {"extra": "forbid"}


class ReactionResponse(BaseModel):
    """Reaction state after a toggle."""

    post_id: str
    reaction: str
    reacted: bool
    reactions: dict[str, int]
    reaction_count: int


class CommentRequest(BaseModel):
    """Request to comment on a post."""

    content: str = Field(min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment content is required")
        return v


class DeletedResponse(BaseModel):
    """Acknowledgement of a delete."""

    message: str


@router.get("", response_model=list[PostOut])
async def list_posts(current_user: dict[str, Any] = Depends(get_current_user)) -> list[PostOut]:
    """Feed, newest first."""
    async with db_session() as session:
        feed = await PostRepo(session).list_feed()
    return [PostOut.model_validate(post) for post in feed]


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    content: str = Form(...),
    file: UploadFile | None = File(None),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> PostOut:
    """Share a post, optionally with an attachment."""
    content = content.strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Post content is required",
        )

    file_url = file_type = None
    if has_file(file):
        stored = await store_upload(file)
        file_url, file_type = stored.url, stored.mime_type

    async with db_session() as session:
        post = await PostRepo(session).create_post(
            user_id=current_user["id"],
            content=content,
            file_url=file_url,
            file_type=file_type,
        )
        await session.commit()

    post["user"] = current_user
    logger.info(f"User {current_user['id']} created post {post['id']}")

    await notify_all(
        NotificationType.NEW_POST,
        "New Post Shared",
        f"{current_user['name']} shared a new post",
        related_user_id=current_user["id"],
    )
    await publish_event(
        EVENT_POST_CREATED,
        actor_id=current_user["id"],
        entity_id=post["id"],
        payload={"has_file": file_url is not None},
    )
    return PostOut.model_validate(post)


@router.delete("/{post_id}", response_model=DeletedResponse)
async def delete_post(
    post_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> DeletedResponse:
    """Delete one of the caller's posts."""
    async with db_session() as session:
        repo = PostRepo(session)
        post = await repo.get_by_id(post_id)
        if not await repo.delete_post(post_id, current_user["id"]):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        await session.commit()

    remove_upload(post["file_url"] if post else None)
    logger.info(f"User {current_user['id']} deleted post {post_id}")
    return DeletedResponse(message="Post deleted successfully")


@router.post("/{post_id}/reactions", response_model=ReactionResponse)
async def toggle_reaction(
    post_id: str,
    request: ReactionRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ReactionResponse:
    """Toggle the caller's reaction on a post."""
    async with db_session() as session:
        repo = PostRepo(session)
        if await repo.get_by_id(post_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        reacted = await repo.toggle_reaction(post_id, current_user["id"], request.reaction.value)
        await session.commit()
        counts = (await repo.reaction_counts_for([post_id])).get(post_id, {})

    return ReactionResponse(
        post_id=post_id,
        reaction=request.reaction.value,
        reacted=reacted,
        reactions=counts,
        reaction_count=sum(counts.values()),
    )


@router.post("/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    request: CommentRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> CommentOut:
    """Comment on a post."""
    async with db_session() as session:
        if await PostRepo(session).get_by_id(post_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        comment = await CommentRepo(session).create_comment(post_id, current_user["id"], request.content)
        await session.commit()

    await publish_event(
        EVENT_COMMENT_CREATED,
        actor_id=current_user["id"],
        entity_id=comment["id"],
        payload={"post_id": post_id},
    )
    return CommentOut.model_validate(comment)
