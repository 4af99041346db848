"""Base repository shared by every table repository."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import sqlalchemy as sa

from olofalumni.db.schema import users

SUMMARY_FIELDS = ("id", "name", "profile_picture", "year_of_completion", "stream_clan")


def user_summary_columns(table: sa.Table = users, prefix: str = "user") -> list[sa.ColumnElement]:
    """Labelled columns for the author summary embedded in joined rows."""
    return [table.c[field].label(f"{prefix}__{field}") for field in SUMMARY_FIELDS]


def split_user_summary(row: Mapping[str, Any], prefix: str = "user") -> dict[str, Any]:
    """Fold the ``<prefix>__*`` columns of a joined row into a nested dict.

    Returns a copy of the row with the prefixed columns removed and a
    ``prefix`` key holding the summary (``None`` when the join found nothing).
    """
    data: dict[str, Any] = {}
    summary: dict[str, Any] = {}
    marker = f"{prefix}__"
    for key, value in row.items():
        if key.startswith(marker):
            summary[key[len(marker):]] = value
        else:
            data[key] = value
    data[prefix] = summary if summary.get("id") is not None else None
    return data


class BaseRepo(ABC):
    """Base repository class.

    Invariants:
    - Repositories never commit; the caller owns the transaction
    - Rows are returned as plain dicts, never as live Row objects
    - Entity ids are generated app-side as uuid4 strings
    """

    @staticmethod
    def now() -> datetime:
        """Get current UTC timestamp.

        Returns:
            Current UTC datetime. Use this instead of datetime.utcnow() for consistency.
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def generate_id() -> str:
        """Generate a new entity id (uuid4, string form)."""
        return str(uuid4())

    @abstractmethod
    def get_by_id(self, entity_id: str) -> Any:
        """Get entity by ID.

        Returns:
            Entity row as a dict or None if not found
        """
        raise NotImplementedError

    @abstractmethod
    def create(self, data: dict[str, Any]) -> Any:
        """Create new entity from a data dictionary."""
        raise NotImplementedError

    @abstractmethod
    def update(self, entity_id: str, data: dict[str, Any]) -> Any:
        """Update entity; returns the updated row or a found flag."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Delete entity.

        Returns:
            True if deleted, False if not found
        """
        raise NotImplementedError
