"""Event envelope for the Redis activity stream."""

import json
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class EventEnvelope(BaseModel):
    """Event envelope for the activity stream.

    Every event names the member whose action produced it.
    """

    event_id: UUID = Field(default_factory=uuid4)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str
    actor_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    idempotency_key: str

    model_config = {"extra": "forbid", "frozen": False}

    def as_redis_fields(self) -> dict[str, str]:
        """Convert envelope to Redis stream fields (all values as strings).

        Returns:
            Dictionary with string keys and string values suitable for Redis XADD
        """
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "event_name": self.event_name,
            "actor_id": self.actor_id,
            "payload": json.dumps(self.payload, default=str),
            "idempotency_key": self.idempotency_key,
        }

    @classmethod
    def from_redis_fields(cls, fields: dict[bytes | str, bytes | str]) -> "EventEnvelope":
        """Rebuild an envelope from the fields of a stream entry."""
        decoded = {
            (k.decode() if isinstance(k, bytes) else k): (v.decode() if isinstance(v, bytes) else v)
            for k, v in fields.items()
        }
        return cls(
            event_id=UUID(decoded["event_id"]),
            occurred_at=datetime.fromisoformat(decoded["occurred_at"]),
            event_name=decoded["event_name"],
            actor_id=decoded["actor_id"],
            payload=json.loads(decoded.get("payload") or "{}"),
            idempotency_key=decoded["idempotency_key"],
        )


def make_idempotency_key(event_name: str, entity_id: str) -> str:
    """Deterministic key for the event emitted about one entity."""
    return f"{event_name}:{entity_id}"
