"""Outbound services."""

from olofalumni.services.email import (
    ConsoleMailer,
    Mailer,
    MailDeliveryError,
    MockMailer,
    OutgoingMail,
    SmtpMailer,
    get_mailer,
    send_password_reset_email,
    send_verification_email,
    send_welcome_email,
    set_mailer,
)
from olofalumni.services.notifications import notify_all

__all__ = [
    "ConsoleMailer",
    "get_mailer",
    "Mailer",
    "MailDeliveryError",
    "MockMailer",
    "notify_all",
    "OutgoingMail",
    "send_password_reset_email",
    "send_verification_email",
    "send_welcome_email",
    "set_mailer",
    "SmtpMailer",
]
