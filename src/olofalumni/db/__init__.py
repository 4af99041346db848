"""Database access layer."""

from olofalumni.db.engine import get_async_engine
from olofalumni.db.schema import init_db, metadata
from olofalumni.db.session import db_session, reset_session_factory

__all__ = ["get_async_engine", "db_session", "init_db", "metadata", "reset_session_factory"]
