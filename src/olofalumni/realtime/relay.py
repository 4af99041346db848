"""Chat relay: persist a message, then forward it to the recipient's socket if open."""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from olofalumni.contracts.models import MessageOut
from olofalumni.db.repos import ConversationRepo, other_participant_id
from olofalumni.db.session import db_session
from olofalumni.events import publish_event
from olofalumni.events.constants import EVENT_MESSAGE_SENT
from olofalumni.realtime.connections import ConnectionManager, manager

logger = logging.getLogger(__name__)

FRAME_CHAT_MESSAGE = "chat_message"
FRAME_PING = "ping"
MAX_FILE_TYPE_LENGTH = 100


class RelayError(ValueError):
    """Raised for a frame the relay refuses; reported back to the sender."""


class ChatMessageFrame(BaseModel):
    """Inbound ``chat_message`` frame.

    Accepts both camelCase (browser client) and snake_case keys.
    ``recipientId`` is tolerated but the recipient is always derived from the
    conversation.
    """

    type: str
    conversation_id: str
    content: str | None = None
    file_url: str | None = None
    file_type: str | None = Field(None, max_length=MAX_FILE_TYPE_LENGTH)
    recipient_id: str | None = None

    model_config = {"extra": "ignore", "populate_by_name": True}

    @classmethod
    def parse(cls, raw: dict[str, Any]) -> "ChatMessageFrame":
        aliases = {
            "conversationId": "conversation_id",
            "fileUrl": "file_url",
            "fileType": "file_type",
            "recipientId": "recipient_id",
        }
        normalized = {aliases.get(k, k): v for k, v in raw.items()}
        try:
            return cls.model_validate(normalized)
        except ValidationError as e:
            raise RelayError(f"Malformed chat_message frame: {e.errors()[0]['msg']}") from e


async def relay_message(
    message: dict[str, Any],
    recipient_id: str,
    connections: ConnectionManager = manager,
) -> bool:
    """Forward a stored message to the recipient as a ``new_message`` frame.

    Returns:
        True if the recipient was online and the frame was written
    """
    payload = MessageOut.model_validate(message).model_dump(mode="json")
    delivered = await connections.send(recipient_id, {"type": "new_message", "message": payload})
    logger.debug(
        "Relayed message %s to %s (%s)",
        message["id"],
        recipient_id,
        "delivered" if delivered else "offline",
    )
    await publish_event(
        EVENT_MESSAGE_SENT,
        actor_id=message["sender_id"],
        entity_id=message["id"],
        payload={"conversation_id": message["conversation_id"], "recipient_id": recipient_id},
    )
    return delivered


async def handle_chat_message(
    sender_id: str,
    raw: dict[str, Any],
    connections: ConnectionManager = manager,
) -> dict[str, Any]:
    """Persist a message sent over the socket and fan it out.

    Returns:
        The stored message as a JSON-ready dict

    Raises:
        RelayError: malformed frame, empty message, or sender not a participant
    """
    frame = ChatMessageFrame.parse(raw)
    content = (frame.content or "").strip() or None
    if content is None and not frame.file_url:
        raise RelayError("Message must have content or a file")

    async with db_session() as session:
        repo = ConversationRepo(session)
        conversation = await repo.get_for_participant(frame.conversation_id, sender_id)
        if conversation is None:
            raise RelayError(f"Conversation {frame.conversation_id} not found")

        message = await repo.add_message(
            conversation_id=conversation["id"],
            sender_id=sender_id,
            content=content,
            file_url=frame.file_url,
            file_type=frame.file_type,
        )
        await session.commit()

    await relay_message(message, other_participant_id(conversation, sender_id), connections)
    return MessageOut.model_validate(message).model_dump(mode="json")


async def dispatch_frame(
    sender_id: str,
    raw: Any,
    connections: ConnectionManager = manager,
) -> dict[str, Any]:
    """Handle one inbound frame and return the reply for the sender."""
    if not isinstance(raw, dict):
        return {"type": "error", "detail": "Frame must be a JSON object"}

    frame_type = raw.get("type")
    if frame_type == FRAME_PING:
        return {"type": "pong"}
    if frame_type != FRAME_CHAT_MESSAGE:
        return {"type": "error", "detail": f"Unsupported frame type: {frame_type!r}"}

    try:
        message = await handle_chat_message(sender_id, raw, connections)
    except RelayError as e:
        return {"type": "error", "detail": str(e)}
    return {"type": "message_sent", "message": message}
