"""Post, comment and reaction repositories."""

from collections import defaultdict
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from olofalumni.db.repos.base import BaseRepo, split_user_summary, user_summary_columns
from olofalumni.db.schema import comments, post_reactions, posts, users


class PostRepo(BaseRepo):
    """Repository for posts and post_reactions tables."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_post(
        self,
        user_id: str,
        content: str,
        file_url: str | None = None,
        file_type: str | None = None,
    ) -> dict[str, Any]:
        """Create a post and return the stored row."""
        post_id = self.generate_id()
        await self.session.execute(
            sa.insert(posts).values(
                id=post_id,
                user_id=user_id,
                content=content,
                file_url=file_url,
                file_type=file_type,
                created_at=self.now(),
            )
        )
        post = await self.get_by_id(post_id)
        assert post is not None
        return post

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a post by ID."""
        result = await self.session.execute(sa.select(posts).where(posts.c.id == entity_id))
        row = result.mappings().fetchone()
        return dict(row) if row else None

    async def list_feed(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return posts newest first with author, comments and reaction counts.

        Comments are ordered oldest first and carry their own author summary.
        """
        stmt = (
            sa.select(posts, *user_summary_columns())
            .join(users, posts.c.user_id == users.c.id)
            .order_by(posts.c.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        feed = [split_user_summary(row) for row in result.mappings().all()]
        if not feed:
            return []

        post_ids = [p["id"] for p in feed]
        comments_by_post = await CommentRepo(self.session).list_for_posts(post_ids)
        reactions_by_post = await self.reaction_counts_for(post_ids)

        for post in feed:
            post["comments"] = comments_by_post.get(post["id"], [])
            post["reactions"] = reactions_by_post.get(post["id"], {})
        return feed

    async def delete_post(self, post_id: str, user_id: str) -> bool:
        """Delete a post owned by ``user_id`` together with its comments and reactions."""
        owned = await self.session.execute(
            sa.select(posts.c.id).where(posts.c.id == post_id, posts.c.user_id == user_id)
        )
        if owned.first() is None:
            return False

        await self.session.execute(sa.delete(comments).where(comments.c.post_id == post_id))
        await self.session.execute(sa.delete(post_reactions).where(post_reactions.c.post_id == post_id))
        result = await self.session.execute(sa.delete(posts).where(posts.c.id == post_id))
        return result.rowcount > 0

    async def toggle_reaction(self, post_id: str, user_id: str, reaction: str) -> bool:
        """Toggle ``reaction`` for the user on a post.

        Same reaction again removes it; a different reaction replaces it.

        Returns:
            True if the user reacts to the post afterwards, False if removed
        """
        result = await self.session.execute(
            sa.select(post_reactions.c.reaction).where(
                post_reactions.c.post_id == post_id,
                post_reactions.c.user_id == user_id,
            )
        )
        existing = result.scalar_one_or_none()

        if existing == reaction:
            await self.session.execute(
                sa.delete(post_reactions).where(
                    post_reactions.c.post_id == post_id,
                    post_reactions.c.user_id == user_id,
                )
            )
            return False

        if existing is None:
            await self.session.execute(
                sa.insert(post_reactions).values(
                    post_id=post_id,
                    user_id=user_id,
                    reaction=reaction,
                    created_at=self.now(),
                )
            )
        else:
            await self.session.execute(
                sa.update(post_reactions)
                .where(
                    post_reactions.c.post_id == post_id,
                    post_reactions.c.user_id == user_id,
                )
                .values(reaction=reaction, created_at=self.now())
            )
        return True

    async def reaction_counts_for(self, post_ids: list[str]) -> dict[str, dict[str, int]]:
        """Map post id -> {reaction: count} for the given posts."""
        if not post_ids:
            return {}
        result = await self.session.execute(
            sa.select(
                post_reactions.c.post_id,
                post_reactions.c.reaction,
                sa.func.count().label("total"),
            )
            .where(post_reactions.c.post_id.in_(post_ids))
            .group_by(post_reactions.c.post_id, post_reactions.c.reaction)
        )
        counts: dict[str, dict[str, int]] = defaultdict(dict)
        for post_id, reaction, total in result.all():
            counts[post_id][reaction] = int(total)
        return dict(counts)

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create post (BaseRepo interface)."""
        return await self.create_post(
            user_id=data["user_id"],
            content=data["content"],
            file_url=data.get("file_url"),
            file_type=data.get("file_type"),
        )

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Update post content."""
        result = await self.session.execute(
            sa.update(posts).where(posts.c.id == entity_id).values(content=data["content"])
        )
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        """Delete post regardless of owner."""
        await self.session.execute(sa.delete(comments).where(comments.c.post_id == entity_id))
        await self.session.execute(sa.delete(post_reactions).where(post_reactions.c.post_id == entity_id))
        result = await self.session.execute(sa.delete(posts).where(posts.c.id == entity_id))
        return result.rowcount > 0


class CommentRepo(BaseRepo):
    """Repository for comments table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_comment(self, post_id: str, user_id: str, content: str) -> dict[str, Any]:
        """Create a comment and return it with the author summary."""
        comment_id = self.generate_id()
        await self.session.execute(
            sa.insert(comments).values(
                id=comment_id,
                post_id=post_id,
                user_id=user_id,
                content=content,
                created_at=self.now(),
            )
        )
        comment = await self.get_by_id(comment_id)
        assert comment is not None
        return comment

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a comment by ID with its author summary."""
        result = await self.session.execute(
            sa.select(comments, *user_summary_columns())
            .join(users, comments.c.user_id == users.c.id)
            .where(comments.c.id == entity_id)
        )
        row = result.mappings().fetchone()
        return split_user_summary(row) if row else None

    async def list_for_posts(self, post_ids: list[str]) -> dict[str, list[dict[str, Any]]]:
        """Map post id -> comments (oldest first) for the given posts."""
        if not post_ids:
            return {}
        result = await self.session.execute(
            sa.select(comments, *user_summary_columns())
            .join(users, comments.c.user_id == users.c.id)
            .where(comments.c.post_id.in_(post_ids))
            .order_by(comments.c.created_at.asc())
        )
        grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
        for row in result.mappings().all():
            comment = split_user_summary(row)
            grouped[comment["post_id"]].append(comment)
        return dict(grouped)

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create comment (BaseRepo interface)."""
        return await self.create_comment(data["post_id"], data["user_id"], data["content"])

    async def update(self, entity_id: str, data: dict[str, Any]) -> bool:
        """Update comment content."""
        result = await self.session.execute(
            sa.update(comments).where(comments.c.id == entity_id).values(content=data["content"])
        )
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        """Delete comment."""
        result = await self.session.execute(sa.delete(comments).where(comments.c.id == entity_id))
        return result.rowcount > 0
