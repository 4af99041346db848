"""Redis activity stream."""

from olofalumni.events.bus import EventBus, publish_event
from olofalumni.events.constants import STREAM_MAIN
from olofalumni.events.envelope import EventEnvelope, make_idempotency_key

__all__ = [
    "EventBus",
    "EventEnvelope",
    "STREAM_MAIN",
    "make_idempotency_key",
    "publish_event",
]
