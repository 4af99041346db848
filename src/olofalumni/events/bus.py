"""Redis Streams event bus publisher."""

import logging
from typing import Any

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from olofalumni.events.constants import STREAM_MAIN, STREAM_MAXLEN
from olofalumni.events.envelope import EventEnvelope, make_idempotency_key
from olofalumni.settings import get_settings

logger = logging.getLogger(__name__)


class EventBus:
    """Event bus for publishing events to Redis Streams."""

    def __init__(self, redis: Redis, stream: str = STREAM_MAIN) -> None:
        """Initialize event bus.

        Args:
            redis: Redis async client
            stream: Stream key to append to
        """
        self.redis = redis
        self.stream = stream

    async def publish(self, envelope: EventEnvelope) -> str:
        """Publish event to the stream.

        Args:
            envelope: Event envelope to publish

        Returns:
            Redis message ID (e.g., "1234567890123-0")
        """
        fields = envelope.as_redis_fields()
        message_id = await self.redis.xadd(
            self.stream, fields, maxlen=STREAM_MAXLEN, approximate=True
        )
        if isinstance(message_id, bytes):
            return message_id.decode()
        return message_id


async def get_redis() -> Redis:
    """Get Redis client."""
    settings = get_settings()
    return redis.from_url(settings.redis_url)


async def publish_event(
    event_name: str,
    actor_id: str,
    entity_id: str,
    payload: dict[str, Any] | None = None,
) -> bool:
    """Publish a community event, best-effort.

    Skipped when events are disabled; Redis failures are logged, not raised.

    Returns:
        True if the event reached the stream
    """
    if not get_settings().events_enabled:
        return False

    envelope = EventEnvelope(
        event_name=event_name,
        actor_id=actor_id,
        payload=payload or {},
        idempotency_key=make_idempotency_key(event_name, entity_id),
    )
    try:
        redis_client = await get_redis()
        try:
            message_id = await EventBus(redis_client).publish(envelope)
        finally:
            await redis_client.aclose()
    except (RedisError, OSError) as e:
        logger.error(f"Failed to publish event {event_name}: {e}")
        return False

    logger.info(f"Published {event_name} for {entity_id} as {message_id}")
    return True
