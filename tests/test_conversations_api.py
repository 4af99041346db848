"""Tests for direct messaging over HTTP."""

import pytest
from starlette.websockets import WebSocketState

from olofalumni.realtime.connections import manager

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class RecordingSocket:
    """Stands in for an open WebSocket."""

    def __init__(self) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.frames: list[dict] = []

    async def send_json(self, frame: dict) -> None:
        self.frames.append(frame)


async def open_conversation(async_client, member, other) -> dict:
    resp = await async_client.post(
        "/api/conversations",
        headers=member["headers"],
        json={"participant_id": other["user"]["id"]},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_get_or_create_is_idempotent_for_the_pair(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")

    first = await open_conversation(async_client, ada, bola)
    again = await open_conversation(async_client, bola, ada)
    assert first["id"] == again["id"]
    assert first["other_participant"]["id"] == bola["user"]["id"]
    assert again["other_participant"]["id"] == ada["user"]["id"]


@pytest.mark.asyncio
async def test_create_conversation_errors(async_client, make_member):
    ada = await make_member("Ada Obi")

    own = await async_client.post(
        "/api/conversations", headers=ada["headers"], json={"participant_id": ada["user"]["id"]}
    )
    assert own.status_code == 400

    unknown = await async_client.post(
        "/api/conversations", headers=ada["headers"], json={"participant_id": "nobody"}
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_messages_flow(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    conversation = await open_conversation(async_client, ada, bola)
    url = f"/api/conversations/{conversation['id']}/messages"

    first = await async_client.post(url, headers=ada["headers"], data={"content": "Hi Bola"})
    assert first.status_code == 201
    assert first.json()["sender"]["name"] == "Ada Obi"

    second = await async_client.post(
        url,
        headers=bola["headers"],
        files={"file": ("photo.png", PNG_BYTES, "image/png")},
    )
    assert second.status_code == 201
    assert second.json()["content"] is None
    assert second.json()["file_type"] == "image/png"

    empty = await async_client.post(url, headers=ada["headers"], data={"content": "   "})
    assert empty.status_code == 400

    messages = (await async_client.get(url, headers=bola["headers"])).json()
    assert [m["sender_id"] for m in messages] == [ada["user"]["id"], bola["user"]["id"]]

    listing = (await async_client.get("/api/conversations", headers=ada["headers"])).json()
    assert len(listing) == 1
    assert listing[0]["last_message"]["id"] == second.json()["id"]
    assert listing[0]["participant1"]["id"] == ada["user"]["id"]
    assert listing[0]["participant2"]["id"] == bola["user"]["id"]


@pytest.mark.asyncio
async def test_conversations_ordered_by_activity(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    chidi = await make_member("Chidi Eze")
    with_bola = await open_conversation(async_client, ada, bola)
    with_chidi = await open_conversation(async_client, ada, chidi)

    await async_client.post(
        f"/api/conversations/{with_bola['id']}/messages", headers=bola["headers"], data={"content": "ping"}
    )
    listing = (await async_client.get("/api/conversations", headers=ada["headers"])).json()
    assert [c["id"] for c in listing] == [with_bola["id"], with_chidi["id"]]


@pytest.mark.asyncio
async def test_outsiders_cannot_read(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    eve = await make_member("Eve Stranger")
    conversation = await open_conversation(async_client, ada, bola)

    assert (await async_client.get(f"/api/conversations/{conversation['id']}", headers=eve["headers"])).status_code == 404
    resp = await async_client.get(f"/api/conversations/{conversation['id']}/messages", headers=eve["headers"])
    assert resp.status_code == 404
    resp = await async_client.post(
        f"/api/conversations/{conversation['id']}/messages", headers=eve["headers"], data={"content": "hi"}
    )
    assert resp.status_code == 404

    own = await async_client.get(f"/api/conversations/{conversation['id']}", headers=bola["headers"])
    assert own.status_code == 200


@pytest.mark.asyncio
async def test_http_message_relayed_to_online_recipient(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    conversation = await open_conversation(async_client, ada, bola)
    socket = RecordingSocket()
    manager.register(bola["user"]["id"], socket)

    resp = await async_client.post(
        f"/api/conversations/{conversation['id']}/messages", headers=ada["headers"], data={"content": "Are you there?"}
    )
    assert resp.status_code == 201
    assert socket.frames == [{"type": "new_message", "message": resp.json()}]
