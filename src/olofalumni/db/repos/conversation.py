"""Conversation and message repository."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from olofalumni.db.repos.base import BaseRepo, split_user_summary, user_summary_columns
from olofalumni.db.schema import conversations, messages, users


class ConversationRepo(BaseRepo):
    """Repository for conversations and messages tables.

    A conversation is identified by the unordered pair of participant ids;
    participant order in the row reflects who opened it and carries no meaning.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_between(self, user_a: str, user_b: str) -> dict[str, Any] | None:
        """Find the conversation for the unordered pair (user_a, user_b)."""
        result = await self.session.execute(
            sa.select(conversations).where(
                sa.or_(
                    sa.and_(
                        conversations.c.participant1_id == user_a,
                        conversations.c.participant2_id == user_b,
                    ),
                    sa.and_(
                        conversations.c.participant1_id == user_b,
                        conversations.c.participant2_id == user_a,
                    ),
                )
            )
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def create_conversation(self, participant1_id: str, participant2_id: str) -> dict[str, Any]:
        """Create a conversation between two users."""
        conversation_id = self.generate_id()
        now = self.now()
        await self.session.execute(
            sa.insert(conversations).values(
                id=conversation_id,
                participant1_id=participant1_id,
                participant2_id=participant2_id,
                last_message_at=now,
                created_at=now,
            )
        )
        conversation = await self.get_by_id(conversation_id)
        assert conversation is not None
        return conversation

    async def get_or_create(self, user_id: str, other_id: str) -> tuple[dict[str, Any], bool]:
        """Return (conversation, created) for the pair."""
        existing = await self.find_between(user_id, other_id)
        if existing:
            return existing, False
        return await self.create_conversation(user_id, other_id), True

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a conversation row by ID."""
        result = await self.session.execute(
            sa.select(conversations).where(conversations.c.id == entity_id)
        )
        row = result.mappings().fetchone()
        return dict(row) if row else None

    async def get_for_participant(self, conversation_id: str, user_id: str) -> dict[str, Any] | None:
        """Get a conversation only if ``user_id`` takes part in it."""
        conversation = await self.get_by_id(conversation_id)
        if not conversation or user_id not in (
            conversation["participant1_id"],
            conversation["participant2_id"],
        ):
            return None
        return conversation

    def _select_with_participants(self) -> sa.Select:
        p1 = users.alias("p1")
        p2 = users.alias("p2")
        return (
            sa.select(
                conversations,
                *user_summary_columns(p1, "participant1"),
                *user_summary_columns(p2, "participant2"),
            )
            .join(p1, conversations.c.participant1_id == p1.c.id)
            .join(p2, conversations.c.participant2_id == p2.c.id)
        )

    async def _with_details(self, row: Any) -> dict[str, Any]:
        data = split_user_summary(split_user_summary(row, "participant1"), "participant2")
        data["last_message"] = await self.last_message(data["id"])
        return data

    async def get_detail(self, conversation_id: str) -> dict[str, Any] | None:
        """Get a conversation with participant summaries and its last message."""
        result = await self.session.execute(
            self._select_with_participants().where(conversations.c.id == conversation_id)
        )
        row = result.mappings().fetchone()
        return await self._with_details(row) if row else None

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Conversations of ``user_id`` by most recent activity.

        Each carries ``participant1``, ``participant2`` summaries and
        ``last_message`` (or None).
        """
        result = await self.session.execute(
            self._select_with_participants()
            .where(
                sa.or_(
                    conversations.c.participant1_id == user_id,
                    conversations.c.participant2_id == user_id,
                )
            )
            .order_by(conversations.c.last_message_at.desc())
        )
        return [await self._with_details(row) for row in result.mappings().all()]

    async def last_message(self, conversation_id: str) -> dict[str, Any] | None:
        """Most recent message of a conversation."""
        result = await self.session.execute(
            sa.select(messages)
            .where(messages.c.conversation_id == conversation_id)
            .order_by(messages.c.created_at.desc())
            .limit(1)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def add_message(
        self,
        conversation_id: str,
        sender_id: str,
        content: str | None = None,
        file_url: str | None = None,
        file_type: str | None = None,
    ) -> dict[str, Any]:
        """Persist a message and bump the conversation's last_message_at."""
        message_id = self.generate_id()
        now = self.now()
        await self.session.execute(
            sa.insert(messages).values(
                id=message_id,
                conversation_id=conversation_id,
                sender_id=sender_id,
                content=content,
                file_url=file_url,
                file_type=file_type,
                created_at=now,
            )
        )
        await self.session.execute(
            sa.update(conversations)
            .where(conversations.c.id == conversation_id)
            .values(last_message_at=now)
        )
        message = await self.get_message(message_id)
        assert message is not None
        return message

    async def get_message(self, message_id: str) -> dict[str, Any] | None:
        """Get a message with its sender summary."""
        result = await self.session.execute(
            sa.select(messages, *user_summary_columns(prefix="sender"))
            .join(users, messages.c.sender_id == users.c.id)
            .where(messages.c.id == message_id)
        )
        row = result.mappings().fetchone()
        return split_user_summary(row, "sender") if row else None

    async def list_messages(self, conversation_id: str) -> list[dict[str, Any]]:
        """Messages of a conversation oldest first, with sender summaries."""
        result = await self.session.execute(
            sa.select(messages, *user_summary_columns(prefix="sender"))
            .join(users, messages.c.sender_id == users.c.id)
            .where(messages.c.conversation_id == conversation_id)
            .order_by(messages.c.created_at.asc())
        )
        return [split_user_summary(row, "sender") for row in result.mappings().all()]

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create conversation (BaseRepo interface)."""
        return await self.create_conversation(data["participant1_id"], data["participant2_id"])

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Touch last_message_at."""
        result = await self.session.execute(
            sa.update(conversations)
            .where(conversations.c.id == entity_id)
            .values(last_message_at=data.get("last_message_at") or self.now())
        )
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        """Delete a conversation and its messages."""
        await self.session.execute(sa.delete(messages).where(messages.c.conversation_id == entity_id))
        result = await self.session.execute(
            sa.delete(conversations).where(conversations.c.id == entity_id)
        )
        return result.rowcount > 0


def other_participant_id(conversation: dict[str, Any], user_id: str) -> str:
    """The participant of ``conversation`` that is not ``user_id``."""
    if conversation["participant1_id"] == user_id:
        return conversation["participant2_id"]
    return conversation["participant1_id"]
