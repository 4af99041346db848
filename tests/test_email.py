"""Tests for email rendering and delivery."""

import pytest

from olofalumni.services.email import (
    ConsoleMailer,
    MailDeliveryError,
    MockMailer,
    SmtpMailer,
    get_mailer,
    send_password_reset_email,
    send_verification_email,
    send_welcome_email,
    set_mailer,
)
from olofalumni.services.email_templates import render
from olofalumni.settings import get_settings


@pytest.mark.asyncio
async def test_verification_email_contains_code(mailer: MockMailer) -> None:
    await send_verification_email("ada@example.com", "Ada", "123456")
    mail = mailer.last_to("ada@example.com")
    assert mail is not None
    assert mail.subject == "OLOF Alumni - Email Verification"
    assert "123456" in mail.html
    assert "Ada" in mail.html
    assert "15 minutes" in mail.html


@pytest.mark.asyncio
async def test_welcome_and_reset_emails(mailer: MockMailer) -> None:
    await send_welcome_email("ada@example.com", "Ada")
    await send_password_reset_email("ada@example.com", "Ada", "654321")
    assert [m.subject for m in mailer.sent] == [
        "Welcome to OLOF Alumni Community!",
        "OLOF Alumni - Password Reset",
    ]
    assert "654321" in mailer.sent[1].html


@pytest.mark.asyncio
async def test_delivery_failure_raises() -> None:
    set_mailer(MockMailer(fail=True))
    with pytest.raises(MailDeliveryError):
        await send_verification_email("ada@example.com", "Ada", "123456")


def test_templates_escape_names() -> None:
    html = render("welcome.html", name="<script>alert(1)</script>", features=[])
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_get_mailer_follows_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    set_mailer(None)
    monkeypatch.setenv("EMAIL_BACKEND", "console")
    get_settings.cache_clear()
    assert isinstance(get_mailer(), ConsoleMailer)

    set_mailer(None)
    monkeypatch.setenv("EMAIL_BACKEND", "smtp")
    get_settings.cache_clear()
    assert isinstance(get_mailer(), SmtpMailer)
