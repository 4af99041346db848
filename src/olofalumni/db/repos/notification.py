"""Notification repository."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from olofalumni.db.repos.base import BaseRepo
from olofalumni.db.schema import notifications, users


class NotificationRepo(BaseRepo):
    """Repository for notifications table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def broadcast(
        self,
        notification_type: str,
        title: str,
        message: str,
        related_user_id: str | None = None,
    ) -> int:
        """Insert one unread notification for every user except ``related_user_id``.

        Returns:
            Number of notifications created
        """
        stmt = sa.select(users.c.id)
        if related_user_id is not None:
            stmt = stmt.where(users.c.id != related_user_id)
        recipients = [row[0] for row in (await self.session.execute(stmt)).all()]
        if not recipients:
            return 0

        now = self.now()
        await self.session.execute(
            sa.insert(notifications),
            [
                {
                    "id": self.generate_id(),
                    "user_id": recipient_id,
                    "type": notification_type,
                    "title": title,
                    "message": message,
                    "is_read": False,
                    "related_user_id": related_user_id,
                    "created_at": now,
                }
                for recipient_id in recipients
            ],
        )
        return len(recipients)

    async def list_for_user(self, user_id: str, unread_only: bool = False) -> list[dict[str, Any]]:
        """Notifications for ``user_id`` newest first, with the related user summary."""
        stmt = (
            sa.select(
                notifications,
                users.c.id.label("related_user__id"),
                users.c.name.label("related_user__name"),
                users.c.profile_picture.label("related_user__profile_picture"),
            )
            .outerjoin(users, notifications.c.related_user_id == users.c.id)
            .where(notifications.c.user_id == user_id)
            .order_by(notifications.c.created_at.desc())
        )
        if unread_only:
            stmt = stmt.where(notifications.c.is_read.is_(False))

        result = await self.session.execute(stmt)
        out = []
        for row in result.mappings().all():
            data = {k: v for k, v in row.items() if not k.startswith("related_user__")}
            data["related_user"] = (
                {
                    "id": row["related_user__id"],
                    "name": row["related_user__name"],
                    "profile_picture": row["related_user__profile_picture"],
                }
                if row["related_user__id"] is not None
                else None
            )
            out.append(data)
        return out

    async def unread_count(self, user_id: str) -> int:
        """Number of unread notifications for ``user_id``."""
        result = await self.session.execute(
            sa.select(sa.func.count())
            .select_from(notifications)
            .where(notifications.c.user_id == user_id, notifications.c.is_read.is_(False))
        )
        return int(result.scalar_one())

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        """Mark one of the user's notifications as read."""
        result = await self.session.execute(
            sa.update(notifications)
            .where(notifications.c.id == notification_id, notifications.c.user_id == user_id)
            .values(is_read=True)
        )
        return result.rowcount > 0

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every notification of the user as read; returns rows touched."""
        result = await self.session.execute(
            sa.update(notifications)
            .where(notifications.c.user_id == user_id, notifications.c.is_read.is_(False))
            .values(is_read=True)
        )
        return result.rowcount

    async def delete_for_user(self, notification_id: str, user_id: str) -> bool:
        """Delete one of the user's notifications."""
        result = await self.session.execute(
            sa.delete(notifications).where(
                notifications.c.id == notification_id,
                notifications.c.user_id == user_id,
            )
        )
        return result.rowcount > 0

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a notification by ID."""
        result = await self.session.execute(
            sa.select(notifications).where(notifications.c.id == entity_id)
        )
        row = result.mappings().fetchone()
        return dict(row) if row else None

    async def create(self, data: dict[str, Any]) -> str:
        """Create a single notification (BaseRepo interface)."""
        notification_id = self.generate_id()
        await self.session.execute(
            sa.insert(notifications).values(
                id=notification_id,
                user_id=data["user_id"],
                type=data["type"],
                title=data["title"],
                message=data["message"],
                is_read=False,
                related_user_id=data.get("related_user_id"),
                created_at=self.now(),
            )
        )
        return notification_id

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Update read flag."""
        result = await self.session.execute(
            sa.update(notifications)
            .where(notifications.c.id == entity_id)
            .values(is_read=bool(data.get("is_read", True)))
        )
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        """Delete notification."""
        result = await self.session.execute(
            sa.delete(notifications).where(notifications.c.id == entity_id)
        )
        return result.rowcount > 0
