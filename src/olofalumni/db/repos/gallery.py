"""Gallery repository."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from olofalumni.db.repos.base import BaseRepo, split_user_summary, user_summary_columns
from olofalumni.db.schema import gallery, users


class GalleryRepo(BaseRepo):
    """Repository for gallery table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_photo(
        self,
        user_id: str,
        filename: str,
        original_name: str,
        mime_type: str,
        size: int,
        caption: str | None = None,
    ) -> dict[str, Any]:
        """Record an uploaded photo."""
        photo_id = self.generate_id()
        await self.session.execute(
            sa.insert(gallery).values(
                id=photo_id,
                user_id=user_id,
                filename=filename,
                original_name=original_name,
                mime_type=mime_type,
                size=size,
                caption=caption or None,
                created_at=self.now(),
            )
        )
        photo = await self.get_by_id(photo_id)
        assert photo is not None
        return photo

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a photo by ID with its uploader summary."""
        result = await self.session.execute(
            sa.select(gallery, *user_summary_columns())
            .outerjoin(users, gallery.c.user_id == users.c.id)
            .where(gallery.c.id == entity_id)
        )
        row = result.mappings().fetchone()
        return split_user_summary(row) if row else None

    async def list_photos(self) -> list[dict[str, Any]]:
        """All photos, newest first."""
        result = await self.session.execute(
            sa.select(gallery, *user_summary_columns())
            .outerjoin(users, gallery.c.user_id == users.c.id)
            .order_by(gallery.c.created_at.desc())
        )
        return [split_user_summary(row) for row in result.mappings().all()]

    async def delete_photo(self, photo_id: str, user_id: str) -> dict[str, Any] | None:
        """Delete a photo owned by ``user_id``; returns the deleted row."""
        photo = await self.get_by_id(photo_id)
        if not photo or photo["user_id"] != user_id:
            return None
        await self.delete(photo_id)
        return photo

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create photo (BaseRepo interface)."""
        return await self.create_photo(
            user_id=data["user_id"],
            filename=data["filename"],
            original_name=data["original_name"],
            mime_type=data["mime_type"],
            size=data["size"],
            caption=data.get("caption"),
        )

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Update photo caption."""
        result = await self.session.execute(
            sa.update(gallery).where(gallery.c.id == entity_id).values(caption=data.get("caption"))
        )
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        """Delete photo row."""
        result = await self.session.execute(sa.delete(gallery).where(gallery.c.id == entity_id))
        return result.rowcount > 0
