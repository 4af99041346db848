"""Direct messaging routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from olofalumni.api.deps import get_current_user, has_file, store_upload
from olofalumni.contracts.models import ConversationOut, MessageOut, conversation_view
from olofalumni.db.repos import ConversationRepo, UserRepo, other_participant_id
from olofalumni.db.session import db_session
from olofalumni.realtime.relay import relay_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


class CreateConversationRequest(BaseModel):
    """Request to open a conversation with another member."""

    participant_id: str = Field(min_length=1)

    model_config = {"extra": "forbid"}


async def _participant_conversation(repo: ConversationRepo, conversation_id: str, user_id: str) -> dict[str, Any]:
    conversation = await repo.get_for_participant(conversation_id, user_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    return conversation


@router.get("", response_model=list[ConversationOut])
async def list_conversations(
    current_user: dict[str, Any] = Depends(get_current_user),
) -> list[ConversationOut]:
    """The caller's conversations, most recently active first."""
    async with db_session() as session:
        rows = await ConversationRepo(session).list_for_user(current_user["id"])
    return [conversation_view(row, current_user["id"]) for row in rows]


@router.post("", response_model=ConversationOut)
async def get_or_create_conversation(
    request: CreateConversationRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ConversationOut:
    """Return the conversation with ``participant_id``, creating it if needed."""
    if request.participant_id == current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot start a conversation with yourself",
        )

    async with db_session() as session:
        if await UserRepo(session).get_by_id(request.participant_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        repo = ConversationRepo(session)
        conversation, created = await repo.get_or_create(current_user["id"], request.participant_id)
        await session.commit()
        row = await repo.get_detail(conversation["id"])

    if created:
        logger.info(f"Opened conversation {conversation['id']} between {current_user['id']} and {request.participant_id}")
    return conversation_view(row, current_user["id"])


@router.get("/{conversation_id}", response_model=ConversationOut)
async def get_conversation(
    conversation_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ConversationOut:
    """One conversation the caller takes part in."""
    async with db_session() as session:
        repo = ConversationRepo(session)
        await _participant_conversation(repo, conversation_id, current_user["id"])
        row = await repo.get_detail(conversation_id)
    return conversation_view(row, current_user["id"])


@router.get("/{conversation_id}/messages", response_model=list[MessageOut])
async def list_messages(
    conversation_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> list[MessageOut]:
    """Messages in a conversation, oldest first."""
    async with db_session() as session:
        repo = ConversationRepo(session)
        await _participant_conversation(repo, conversation_id, current_user["id"])
        messages = await repo.list_messages(conversation_id)
    return [MessageOut.model_validate(message) for message in messages]


@router.post("/{conversation_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    conversation_id: str,
    content: str | None = Form(None),
    file: UploadFile | None = File(None),
    current_user: dict[str, Any] = Depends(get_current_user),
) -> MessageOut:
    """Send a message and relay it to the other participant if they are online."""
    content = (content or "").strip() or None
    if content is None and not has_file(file):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message must have content or a file",
        )

    async with db_session() as session:
        repo = ConversationRepo(session)
        conversation = await _participant_conversation(repo, conversation_id, current_user["id"])

        file_url = file_type = None
        if has_file(file):
            stored = await store_upload(file)
            file_url, file_type = stored.url, stored.mime_type

        message = await repo.add_message(
            conversation_id=conversation_id,
            sender_id=current_user["id"],
            content=content,
            file_url=file_url,
            file_type=file_type,
        )
        await session.commit()

    await relay_message(message, other_participant_id(conversation, current_user["id"]))
    return MessageOut.model_validate(message)
