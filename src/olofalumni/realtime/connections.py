"""Registry of open chat sockets keyed by user id."""

import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Maps each user to their most recent socket.

    Invariants:
    - At most one socket per user; a new connection replaces the old mapping
    - Unregistering only removes the mapping if it still points at that socket
    - Sends are best-effort: no queueing, no retry
    """

    def __init__(self) -> None:
        self._sockets: dict[str, WebSocket] = {}

    def register(self, user_id: str, websocket: WebSocket) -> None:
        """Map ``user_id`` to ``websocket``."""
        self._sockets[user_id] = websocket

    def unregister(self, user_id: str, websocket: WebSocket) -> None:
        """Drop the mapping if it is still ``websocket``."""
        if self._sockets.get(user_id) is websocket:
            del self._sockets[user_id]

    def get(self, user_id: str) -> WebSocket | None:
        """Socket for ``user_id`` if connected."""
        return self._sockets.get(user_id)

    def is_online(self, user_id: str) -> bool:
        """Whether ``user_id`` has an open socket."""
        websocket = self._sockets.get(user_id)
        return websocket is not None and websocket.client_state == WebSocketState.CONNECTED

    def online_user_ids(self) -> list[str]:
        """Ids of users with an open socket."""
        return [uid for uid in self._sockets if self.is_online(uid)]

    async def send(self, user_id: str, frame: dict[str, Any]) -> bool:
        """Send a JSON frame to ``user_id`` if their socket is open.

        Returns:
            True if the frame was written
        """
        websocket = self._sockets.get(user_id)
        if websocket is None or websocket.client_state != WebSocketState.CONNECTED:
            return False
        try:
            await websocket.send_json(frame)
        except (RuntimeError, OSError) as e:
            logger.warning("Dropping %s frame for user %s: %s", frame.get("type"), user_id, e)
            return False
        return True

    def clear(self) -> None:
        """Forget every connection (for testing)."""
        self._sockets.clear()


manager = ConnectionManager()
