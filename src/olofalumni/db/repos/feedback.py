"""Feedback and report repositories."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from olofalumni.contracts.enums import ReportStatus
from olofalumni.db.repos.base import BaseRepo, split_user_summary, user_summary_columns
from olofalumni.db.schema import feedback, feedback_likes, reports, users
from olofalumni.db.types import PaginationParams


class FeedbackRepo(BaseRepo):
    """Repository for feedback and feedback_likes tables."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_feedback(
        self,
        user_id: str,
        feedback_type: str,
        subject: str,
        message: str,
        rating: int | None = None,
    ) -> dict[str, Any]:
        """Store a feedback entry."""
        feedback_id = self.generate_id()
        await self.session.execute(
            sa.insert(feedback).values(
                id=feedback_id,
                user_id=user_id,
                type=feedback_type,
                subject=subject,
                message=message,
                rating=rating,
                created_at=self.now(),
            )
        )
        entry = await self.get_by_id(feedback_id)
        assert entry is not None
        return entry

    def _select_with_likes(self) -> sa.Select:
        likes = (
            sa.select(sa.func.count())
            .where(feedback_likes.c.feedback_id == feedback.c.id)
            .correlate(feedback)
            .scalar_subquery()
        )
        return (
            sa.select(feedback, likes.label("likes"), *user_summary_columns())
            .outerjoin(users, feedback.c.user_id == users.c.id)
        )

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a feedback entry with author summary and like count."""
        result = await self.session.execute(
            self._select_with_likes().where(feedback.c.id == entity_id)
        )
        row = result.mappings().fetchone()
        return split_user_summary(row) if row else None

    async def list_feedback(self, pagination: PaginationParams) -> list[dict[str, Any]]:
        """Latest feedback first."""
        result = await self.session.execute(
            self._select_with_likes()
            .order_by(feedback.c.created_at.desc())
            .limit(pagination.limit)
            .offset(pagination.offset)
        )
        return [split_user_summary(row) for row in result.mappings().all()]

    async def toggle_like(self, feedback_id: str, user_id: str) -> tuple[bool, int]:
        """Toggle the user's like on a feedback entry.

        Returns:
            (liked, total likes) after the toggle
        """
        existing = await self.session.execute(
            sa.select(feedback_likes.c.user_id).where(
                feedback_likes.c.feedback_id == feedback_id,
                feedback_likes.c.user_id == user_id,
            )
        )
        if existing.first() is None:
            await self.session.execute(
                sa.insert(feedback_likes).values(
                    feedback_id=feedback_id, user_id=user_id, created_at=self.now()
                )
            )
            liked = True
        else:
            await self.session.execute(
                sa.delete(feedback_likes).where(
                    feedback_likes.c.feedback_id == feedback_id,
                    feedback_likes.c.user_id == user_id,
                )
            )
            liked = False

        total = await self.session.execute(
            sa.select(sa.func.count())
            .select_from(feedback_likes)
            .where(feedback_likes.c.feedback_id == feedback_id)
        )
        return liked, int(total.scalar_one())

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create feedback (BaseRepo interface)."""
        return await self.create_feedback(
            user_id=data["user_id"],
            feedback_type=data["type"],
            subject=data["subject"],
            message=data["message"],
            rating=data.get("rating"),
        )

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Feedback is immutable once submitted; always returns False."""
        return False

    async def delete(self, entity_id: str) -> bool:
        """Delete feedback and its likes."""
        await self.session.execute(
            sa.delete(feedback_likes).where(feedback_likes.c.feedback_id == entity_id)
        )
        result = await self.session.execute(sa.delete(feedback).where(feedback.c.id == entity_id))
        return result.rowcount > 0


class ReportRepo(BaseRepo):
    """Repository for reports table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_report(
        self,
        reporter_id: str,
        reported_user_id: str,
        reason: str,
        description: str,
    ) -> dict[str, Any]:
        """File a report with status ``open``."""
        report_id = self.generate_id()
        await self.session.execute(
            sa.insert(reports).values(
                id=report_id,
                reporter_id=reporter_id,
                reported_user_id=reported_user_id,
                reason=reason,
                description=description,
                status=ReportStatus.OPEN.value,
                created_at=self.now(),
            )
        )
        report = await self.get_by_id(report_id)
        assert report is not None
        return report

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a report by ID."""
        result = await self.session.execute(sa.select(reports).where(reports.c.id == entity_id))
        row = result.mappings().fetchone()
        return dict(row) if row else None

    async def list_by_reporter(self, reporter_id: str) -> list[dict[str, Any]]:
        """Reports filed by ``reporter_id``, newest first."""
        result = await self.session.execute(
            sa.select(reports)
            .where(reports.c.reporter_id == reporter_id)
            .order_by(reports.c.created_at.desc())
        )
        return [dict(row) for row in result.mappings().all()]

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create report (BaseRepo interface)."""
        return await self.create_report(
            reporter_id=data["reporter_id"],
            reported_user_id=data["reported_user_id"],
            reason=data["reason"],
            description=data["description"],
        )

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Update report status."""
        result = await self.session.execute(
            sa.update(reports).where(reports.c.id == entity_id).values(status=data["status"])
        )
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        """Delete report."""
        result = await self.session.execute(sa.delete(reports).where(reports.c.id == entity_id))
        return result.rowcount > 0
