"""Async database engine configuration."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from olofalumni.settings import get_settings

_engine: AsyncEngine | None = None


def get_async_engine() -> AsyncEngine:
    """Get or create async database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.database_url_async
        kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.debug}
        if url.startswith("sqlite"):
            kwargs["poolclass"] = NullPool
        else:
            kwargs.update(pool_size=5, max_overflow=10)
        _engine = create_async_engine(url, **kwargs)
    return _engine


def reset_engine() -> None:
    """Reset the engine (for testing)."""
    global _engine
    _engine = None
