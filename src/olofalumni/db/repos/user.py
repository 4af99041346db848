"""User repository."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from olofalumni.db.repos.base import BaseRepo
from olofalumni.db.schema import users

# Columns a caller may change through update_user.
UPDATABLE_FIELDS = frozenset({
    "name",
    "email",
    "password",
    "gender",
    "year_of_completion",
    "stream_clan",
    "bio",
    "phone",
    "profile_picture",
    "cover_photo",
    "hide_email",
    "hide_phone",
})


class UserRepo(BaseRepo):
    """Repository for users table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        gender: str,
        year_of_completion: int,
        stream_clan: str,
        verification_code: str | None = None,
        verification_expires_at: datetime | None = None,
    ) -> dict[str, Any]:
        """Create an unverified user and return the stored row."""
        user_id = self.generate_id()
        now = self.now()

        await self.session.execute(
            sa.insert(users).values(
                id=user_id,
                name=name,
                email=email.strip().lower(),
                password=password_hash,
                gender=gender,
                year_of_completion=year_of_completion,
                stream_clan=stream_clan,
                is_verified=False,
                hide_email=False,
                hide_phone=False,
                verification_code=verification_code,
                verification_expires_at=verification_expires_at,
                created_at=now,
                updated_at=now,
            )
        )
        user = await self.get_by_id(user_id)
        assert user is not None
        return user

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Get a user by ID."""
        result = await self.session.execute(sa.select(users).where(users.c.id == entity_id))
        row = result.mappings().fetchone()
        return dict(row) if row else None

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Get a user by (normalised, lowercase) email."""
        result = await self.session.execute(
            sa.select(users).where(users.c.email == email.strip().lower())
        )
        row = result.mappings().fetchone()
        return dict(row) if row else None

    async def email_taken_by_other(self, email: str, user_id: str) -> bool:
        """Whether another account already uses ``email``."""
        result = await self.session.execute(
            sa.select(users.c.id).where(
                users.c.email == email.strip().lower(),
                users.c.id != user_id,
            )
        )
        return result.first() is not None

    async def update_user(self, user_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """Apply ``updates`` (restricted to UPDATABLE_FIELDS) and return the new row."""
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")
        values = {**updates, "updated_at": self.now()}

        result = await self.session.execute(
            sa.update(users).where(users.c.id == user_id).values(**values)
        )
        if result.rowcount == 0:
            return None
        return await self.get_by_id(user_id)

    async def list_verified(
        self,
        year: int | None = None,
        clan: str | None = None,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """List verified users ordered by name, optionally filtered."""
        stmt = sa.select(users).where(users.c.is_verified.is_(True))
        if year is not None:
            stmt = stmt.where(users.c.year_of_completion == year)
        if clan:
            stmt = stmt.where(sa.func.lower(users.c.stream_clan) == clan.strip().lower())
        if query:
            stmt = stmt.where(sa.func.lower(users.c.name).contains(query.strip().lower()))
        stmt = stmt.order_by(users.c.name.asc())

        result = await self.session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def set_verification_code(self, email: str, code: str, expires_at: datetime) -> bool:
        """Store a fresh verification code for the account."""
        result = await self.session.execute(
            sa.update(users)
            .where(users.c.email == email.strip().lower())
            .values(verification_code=code, verification_expires_at=expires_at, updated_at=self.now())
        )
        return result.rowcount > 0

    async def verify_user(self, email: str, code: str) -> bool:
        """Mark the account verified if ``code`` matches and has not expired.

        The code is single-use: it is cleared on success.
        """
        user = await self.get_by_email(email)
        if not user or not user["verification_code"] or user["verification_code"] != code:
            return False
        if _expired(user["verification_expires_at"], self.now()):
            return False

        await self.session.execute(
            sa.update(users)
            .where(users.c.id == user["id"])
            .values(
                is_verified=True,
                verification_code=None,
                verification_expires_at=None,
                updated_at=self.now(),
            )
        )
        return True

    async def set_reset_code(self, email: str, code: str, expires_at: datetime) -> bool:
        """Store a password reset code for the account."""
        result = await self.session.execute(
            sa.update(users)
            .where(users.c.email == email.strip().lower())
            .values(reset_code=code, reset_expires_at=expires_at, updated_at=self.now())
        )
        return result.rowcount > 0

    async def reset_password(self, email: str, code: str, password_hash: str) -> bool:
        """Replace the password if the reset code matches and has not expired."""
        user = await self.get_by_email(email)
        if not user or not user["reset_code"] or user["reset_code"] != code:
            return False
        if _expired(user["reset_expires_at"], self.now()):
            return False

        await self.session.execute(
            sa.update(users)
            .where(users.c.id == user["id"])
            .values(
                password=password_hash,
                reset_code=None,
                reset_expires_at=None,
                updated_at=self.now(),
            )
        )
        return True

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create user (BaseRepo interface)."""
        return await self.create_user(
            name=data["name"],
            email=data["email"],
            password_hash=data["password"],
            gender=data["gender"],
            year_of_completion=data["year_of_completion"],
            stream_clan=data["stream_clan"],
            verification_code=data.get("verification_code"),
            verification_expires_at=data.get("verification_expires_at"),
        )

    async def update(self, entity_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Update user (BaseRepo interface)."""
        return await self.update_user(entity_id, data)

    async def delete(self, entity_id: str) -> bool:
        """Delete user."""
        result = await self.session.execute(sa.delete(users).where(users.c.id == entity_id))
        return result.rowcount > 0


def _expired(expires_at: datetime | None, now: datetime) -> bool:
    if expires_at is None:
        return False
    # SQLite hands back naive datetimes; stored values are always UTC.
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=now.tzinfo)
    return expires_at < now
