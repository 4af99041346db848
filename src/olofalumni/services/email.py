"""Outgoing email: transport interface, implementations and message builders."""

import asyncio
import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

from pydantic import BaseModel

from olofalumni.services.email_templates import WELCOME_FEATURES, render
from olofalumni.settings import get_settings

logger = logging.getLogger(__name__)


class MailDeliveryError(RuntimeError):
    """Raised when a message could not be handed to the mail transport."""


class OutgoingMail(BaseModel):
    """A rendered message."""

    to: str
    subject: str
    html: str

    model_config = {"extra": "forbid"}


class Mailer(ABC):
    """Abstract mail transport."""

    @abstractmethod
    async def send(self, mail: OutgoingMail) -> None:
        """Deliver a message.

        Raises:
            MailDeliveryError: the transport rejected or could not reach the server
        """
        ...


class SmtpMailer(Mailer):
    """SMTP transport; the blocking smtplib call runs in a worker thread."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        use_tls: bool,
        sender: str,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.timeout = timeout

    def _build(self, mail: OutgoingMail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = mail.to
        msg["Subject"] = mail.subject
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(mail.html, subtype="html")
        return msg

    def _send_blocking(self, mail: OutgoingMail) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(self._build(mail))

    async def send(self, mail: OutgoingMail) -> None:
        try:
            await asyncio.to_thread(self._send_blocking, mail)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"SMTP delivery to {mail.to} failed: {e}") from e


class ConsoleMailer(Mailer):
    """Logs messages instead of sending them (local development)."""

    async def send(self, mail: OutgoingMail) -> None:
        logger.info("Email to %s: %s\n%s", mail.to, mail.subject, mail.html)


class MockMailer(Mailer):
    """Records messages in memory; can be told to fail (for testing)."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[OutgoingMail] = []
        self.fail = fail

    async def send(self, mail: OutgoingMail) -> None:
        if self.fail:
            raise MailDeliveryError(f"mock delivery to {mail.to} failed")
        self.sent.append(mail)

    def last_to(self, address: str) -> OutgoingMail | None:
        """Most recent message sent to ``address``."""
        for mail in reversed(self.sent):
            if mail.to == address:
                return mail
        return None


_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    """Get the configured mail transport (singleton)."""
    global _mailer
    if _mailer is None:
        settings = get_settings()
        if settings.email_backend == "console":
            _mailer = ConsoleMailer()
        else:
            _mailer = SmtpMailer(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                use_tls=settings.smtp_use_tls,
                sender=settings.mail_from,
            )
    return _mailer


def set_mailer(mailer: Mailer | None) -> None:
    """Set the mail transport (for testing); None restores the configured one."""
    global _mailer
    _mailer = mailer


async def _deliver(mail: OutgoingMail, kind: str) -> None:
    try:
        await get_mailer().send(mail)
    except MailDeliveryError:
        logger.error("Error sending %s email to %s", kind, mail.to)
        raise
    logger.info("%s email sent to %s", kind.capitalize(), mail.to)


async def send_verification_email(to: str, name: str, code: str) -> None:
    """Email the registration verification code."""
    html = render(
        "verification.html",
        name=name,
        code=code,
        ttl_minutes=get_settings().verification_code_ttl_minutes,
    )
    await _deliver(
        OutgoingMail(to=to, subject="OLOF Alumni - Email Verification", html=html),
        "verification",
    )


async def send_welcome_email(to: str, name: str) -> None:
    """Email the welcome message after verification."""
    html = render("welcome.html", name=name, features=WELCOME_FEATURES)
    await _deliver(
        OutgoingMail(to=to, subject="Welcome to OLOF Alumni Community!", html=html),
        "welcome",
    )


async def send_password_reset_email(to: str, name: str, code: str) -> None:
    """Email a password reset code."""
    html = render(
        "password_reset.html",
        name=name,
        code=code,
        ttl_minutes=get_settings().verification_code_ttl_minutes,
    )
    await _deliver(
        OutgoingMail(to=to, subject="OLOF Alumni - Password Reset", html=html),
        "password reset",
    )
