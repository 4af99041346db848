"""Session factory and the ``db_session`` unit of work used by routes and services."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from olofalumni.db.engine import get_async_engine, reset_engine

_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def reset_session_factory() -> None:
    """Drop the cached factory and engine so the next session rereads settings (for testing)."""
    global _async_session_factory
    reset_engine()
    _async_session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_async_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _async_session_factory


@asynccontextmanager
async def db_session(commit: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """Open a session, rolling back if the block raises.

    Args:
        commit: Commit when the block exits cleanly. Callers that need to
            commit part-way (e.g. before sending mail) leave this off and
            call ``session.commit()`` themselves.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            if commit:
                await session.commit()
        except Exception:
            await session.rollback()
            raise
