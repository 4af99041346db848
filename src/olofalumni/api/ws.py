"""Chat WebSocket endpoint."""

import json
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from olofalumni.api.deps import user_from_token
from olofalumni.core.security import AuthError
from olofalumni.realtime.connections import manager
from olofalumni.realtime.relay import dispatch_frame

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket, token: str | None = Query(None)) -> None:
    """Authenticated chat relay.

    The socket is closed with 1008 before it is accepted when the token is
    missing or invalid. Each inbound text frame gets exactly one reply.
    """
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        user = await user_from_token(token)
    except AuthError as e:
        logger.info(f"Rejected chat socket: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id = user["id"]
    await websocket.accept()
    manager.register(user_id, websocket)
    logger.info(f"User {user_id} connected to chat")

    try:
        while True:
            event = await websocket.receive()
            if event["type"] == "websocket.disconnect":
                logger.info(f"User {user_id} disconnected from chat")
                break
            text = event.get("text")
            if text is None:
                await websocket.send_json({"type": "error", "detail": "Frames must be JSON text"})
                continue
            try:
                raw = json.loads(text)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "detail": "Frame is not valid JSON"})
                continue
            await websocket.send_json(await dispatch_frame(user_id, raw, manager))
    except WebSocketDisconnect:
        logger.info(f"User {user_id} disconnected from chat")
    finally:
        manager.unregister(user_id, websocket)
