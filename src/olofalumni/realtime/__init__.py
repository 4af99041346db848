"""WebSocket chat relay."""

from olofalumni.realtime.connections import ConnectionManager, manager
from olofalumni.realtime.relay import (
    RelayError,
    dispatch_frame,
    handle_chat_message,
    relay_message,
)

__all__ = [
    "ConnectionManager",
    "dispatch_frame",
    "handle_chat_message",
    "manager",
    "relay_message",
    "RelayError",
]
