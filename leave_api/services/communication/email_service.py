# leave_api/services/communication/email_service.py
"""
Email delivery: message structure, SMTP configuration and sending.

This module provides:
- EmailMessage: validated email message dataclass.
- EmailConfig: SMTP configuration built from settings.
- SMTPMailer: sends EmailMessage instances over SMTP.

Services depend on the ``Mailer`` protocol so tests can substitute an
in-memory outbox.
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Protocol

from email_validator import EmailNotValidError, validate_email

from leave_api.config.settings import Settings
from leave_api.core.logging import get_logger

logger = get_logger(__name__)


class EmailError(Exception):
    """Raised when a message is malformed or cannot be delivered."""


def _check_address(address: str, kind: str) -> None:
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError as exc:
        raise EmailError(f"Invalid {kind} email: {address}") from exc


@dataclass
class EmailMessage:
    """Email message structure with validation."""
    subject: str
    to: list[str]
    body_text: str | None = None
    body_html: str | None = None
    from_email: str | None = None

    def __post_init__(self) -> None:
        if not self.subject.strip():
            raise EmailError("Subject cannot be empty")
        if not self.to:
            raise EmailError("At least one recipient is required")
        if not self.body_text and not self.body_html:
            raise EmailError("Either body_text or body_html must be provided")
        for address in self.to:
            _check_address(address, "recipient")


@dataclass
class EmailConfig:
    """SMTP configuration."""
    smtp_host: str
    smtp_port: int
    username: str | None
    password: str | None
    use_tls: bool = True
    from_email: str | None = None
    from_name: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> EmailConfig:
        return cls(
            smtp_host=settings.SMTP_HOST,
            smtp_port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_TLS,
            from_email=settings.EMAIL_FROM_ADDRESS,
            from_name=settings.EMAIL_FROM_NAME,
        )

    @property
    def sender(self) -> str:
        address = self.from_email or self.username or ""
        if self.from_name and address:
            return formataddr((self.from_name, address))
        return address


class Mailer(Protocol):
    def send(self, message: EmailMessage) -> None: ...


class SMTPMailer:
    """Send email through an SMTP relay, one connection per message."""

    def __init__(self, config: EmailConfig, timeout: float = 30.0) -> None:
        self.config = config
        self.timeout = timeout

    def _build(self, message: EmailMessage) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = message.subject
        msg['From'] = message.from_email or self.config.sender
        msg['To'] = ', '.join(message.to)

        if message.body_text:
            msg.attach(MIMEText(message.body_text, 'plain'))
        if message.body_html:
            msg.attach(MIMEText(message.body_html, 'html'))
        return msg

    def send(self, message: EmailMessage) -> None:
        """
        Deliver ``message``.

        Raises:
            EmailError: If the SMTP exchange fails
        """
        try:
            with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=self.timeout) as server:
                if self.config.use_tls:
                    server.starttls()
                if self.config.username and self.config.password:
                    server.login(self.config.username, self.config.password)
                server.send_message(self._build(message), to_addrs=message.to)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_send_failed", recipients=len(message.to), error=str(exc))
            raise EmailError(f"Failed to send email: {exc}") from exc

        logger.info("email_sent", recipients=len(message.to), subject=message.subject)
