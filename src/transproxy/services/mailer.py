"""
Alert mail delivery over SMTP.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from transproxy.config import Settings

logger = logging.getLogger(__name__)


class MailerNotConfigured(Exception):
    """Sender or recipient address is missing."""


class AlertMailer:
    """Sends HTML alert mails through an authenticated STARTTLS server."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str | None,
        recipient: str | None,
        password: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.sender = sender
        self.recipient = recipient
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "AlertMailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_from,
            recipient=settings.email_to,
            password=settings.email_password,
        )

    def build_message(self, subject: str, html: str) -> EmailMessage:
        """Build a multipart message with a plain-text fallback."""
        if not self.sender or not self.recipient:
            raise MailerNotConfigured("EMAIL_FROM and EMAIL_TO must be set")

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = self.recipient
        message.set_content("This alert is best viewed in an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.password:
                smtp.login(self.sender, self.password)
            smtp.send_message(message)

    async def send(self, subject: str, html: str) -> None:
        """
        Send one alert mail.

        Raises:
            MailerNotConfigured: Addresses missing.
            smtplib.SMTPException, OSError: Delivery failed.
        """
        message = self.build_message(subject, html)

        # smtplib is blocking, run in executor
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._deliver, message)
        logger.info(f"Alert mail sent to {self.recipient}: {subject}")
