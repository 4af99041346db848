"""Tests for the chat WebSocket relay."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from conftest import DEFAULT_PASSWORD, auth, registration, sent_code
from olofalumni.db.schema import init_db
from olofalumni.db.session import reset_session_factory
from olofalumni.main import app
from olofalumni.realtime.connections import manager


def make_member_sync(client: TestClient, mailer, name: str) -> dict:
    email = f"{name.split()[0].lower()}@example.com"
    assert client.post("/api/auth/register", json=registration(name, email)).status_code == 201
    assert client.post("/api/auth/verify", json={"email": email, "code": sent_code(mailer, email)}).status_code == 200
    data = client.post("/api/auth/login", json={"email": email, "password": DEFAULT_PASSWORD}).json()
    return {"user": data["user"], "token": data["token"], "headers": auth(data["token"])}


@pytest.fixture
def client(test_settings):
    asyncio.run(init_db())
    reset_session_factory()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pair(client, mailer):
    ada = make_member_sync(client, mailer, "Ada Obi")
    bola = make_member_sync(client, mailer, "Bola Ade")
    conversation = client.post(
        "/api/conversations", headers=ada["headers"], json={"participant_id": bola["user"]["id"]}
    ).json()
    return ada, bola, conversation


def test_rejects_missing_or_bad_token(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws"):
            pass
    assert exc_info.value.code == 1008

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws?token=not-a-jwt"):
            pass
    assert exc_info.value.code == 1008


def test_ping_pong_and_bad_frames(client, pair):
    ada, _, _ = pair
    with client.websocket_connect(f"/ws?token={ada['token']}") as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_text("not json")
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "dance"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "chat_message", "content": "no conversation"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


def test_binary_frame_keeps_socket_open(client, pair):
    ada, _, _ = pair
    with client.websocket_connect(f"/ws?token={ada['token']}") as ws:
        ws.send_bytes(b'{"type": "ping"}')
        assert ws.receive_json() == {"type": "error", "detail": "Frames must be JSON text"}

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


def test_oversized_file_type_rejected(client, pair):
    ada, _, conversation = pair
    with client.websocket_connect(f"/ws?token={ada['token']}") as ws:
        ws.send_json(
            {
                "type": "chat_message",
                "conversationId": conversation["id"],
                "fileUrl": "/uploads/a.png",
                "fileType": "x" * 101,
            }
        )
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

def test_chat_message_relayed_between_sockets(client, pair):
    ada, bola, conversation = pair
    with client.websocket_connect(f"/ws?token={ada['token']}") as ada_ws:
        with client.websocket_connect(f"/ws?token={bola['token']}") as bola_ws:
            assert manager.is_online(ada["user"]["id"])
            assert manager.is_online(bola["user"]["id"])

            ada_ws.send_json(
                {
                    "type": "chat_message",
                    "conversationId": conversation["id"],
                    "content": "Hello over the socket",
                    "recipientId": "ignored",
                }
            )
            relayed = bola_ws.receive_json()
            ack = ada_ws.receive_json()

    assert relayed["type"] == "new_message"
    assert ack["type"] == "message_sent"
    assert relayed["message"] == ack["message"]
    assert ack["message"]["content"] == "Hello over the socket"
    assert ack["message"]["sender_id"] == ada["user"]["id"]
    assert not manager.is_online(ada["user"]["id"])

    messages = client.get(
        f"/api/conversations/{conversation['id']}/messages", headers=bola["headers"]
    ).json()
    assert [m["content"] for m in messages] == ["Hello over the socket"]


def test_offline_recipient_still_gets_stored_message(client, pair):
    ada, bola, conversation = pair
    with client.websocket_connect(f"/ws?token={ada['token']}") as ws:
        ws.send_json({"type": "chat_message", "conversation_id": conversation["id"], "content": "Later"})
        assert ws.receive_json()["type"] == "message_sent"

    messages = client.get(
        f"/api/conversations/{conversation['id']}/messages", headers=bola["headers"]
    ).json()
    assert [m["content"] for m in messages] == ["Later"]


def test_non_participant_cannot_send(client, pair, mailer):
    _, _, conversation = pair
    eve = make_member_sync(client, mailer, "Eve Stranger")
    with client.websocket_connect(f"/ws?token={eve['token']}") as ws:
        ws.send_json({"type": "chat_message", "conversationId": conversation["id"], "content": "hi"})
        reply = ws.receive_json()
    assert reply["type"] == "error"
    assert "not found" in reply["detail"]


def test_http_message_reaches_open_socket(client, pair):
    ada, bola, conversation = pair
    with client.websocket_connect(f"/ws?token={bola['token']}") as ws:
        resp = client.post(
            f"/api/conversations/{conversation['id']}/messages",
            headers=ada["headers"],
            data={"content": "Sent over HTTP"},
        )
        assert resp.status_code == 201
        frame = ws.receive_json()
    assert frame == {"type": "new_message", "message": resp.json()}
