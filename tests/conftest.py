"""Pytest configuration and fixtures."""

import re
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest

from olofalumni.db.schema import init_db
from olofalumni.db.session import reset_session_factory
from olofalumni.main import app
from olofalumni.realtime.connections import manager
from olofalumni.services.email import MockMailer, set_mailer
from olofalumni.settings import get_settings

CODE_RE = re.compile(r">(\d{6})</span>")
DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point settings at a per-test SQLite file and upload directory."""
    monkeypatch.setenv("DATABASE_URL_ASYNC", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("EVENTS_ENABLED", "false")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    get_settings.cache_clear()
    reset_session_factory()
    yield get_settings()
    reset_session_factory()
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def mailer():
    """Record outgoing mail instead of sending it."""
    mock = MockMailer()
    set_mailer(mock)
    yield mock
    set_mailer(None)


@pytest.fixture(autouse=True)
def clear_connections():
    """Forget chat sockets between tests."""
    manager.clear()
    yield
    manager.clear()


@pytest.fixture
async def db(test_settings):
    """Create the schema in the per-test database."""
    await init_db()
    yield


@pytest.fixture
async def async_client(db):
    """Create an async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


def sent_code(mailer: MockMailer, email: str) -> str:
    """The 6-digit code in the latest mail to ``email``."""
    mail = mailer.last_to(email)
    assert mail is not None, f"no mail sent to {email}"
    match = CODE_RE.search(mail.html)
    assert match is not None
    return match.group(1)


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def registration(name: str, email: str, **overrides: Any) -> dict[str, Any]:
    body = {
        "name": name,
        "email": email,
        "password": DEFAULT_PASSWORD,
        "confirm_password": DEFAULT_PASSWORD,
        "gender": "female",
        "year_of_completion": 2015,
        "stream_clan": "Science",
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_member(async_client, mailer) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Register, verify and log in a member; returns ``{"user", "token", "headers"}``."""

    async def _make(name: str = "Ada Obi", email: str | None = None, **overrides: Any) -> dict[str, Any]:
        email = email or f"{name.split()[0].lower()}@example.com"
        resp = await async_client.post("/api/auth/register", json=registration(name, email, **overrides))
        assert resp.status_code == 201, resp.text

        resp = await async_client.post(
            "/api/auth/verify",
            json={"email": email, "code": sent_code(mailer, email)},
        )
        assert resp.status_code == 200, resp.text

        resp = await async_client.post(
            "/api/auth/login",
            json={"email": email, "password": DEFAULT_PASSWORD},
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        return {"user": data["user"], "token": data["token"], "headers": auth(data["token"])}

    return _make
