"""
Outbound email over SMTP.

smtplib is blocking, so sends run in a worker thread. Port 465 uses
implicit TLS; any other port upgrades with STARTTLS when the server
offers it.
"""

import asyncio
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from newsbrief.core.config import settings
from newsbrief.core.errors import EmailDeliveryError
from newsbrief.core.logging import get_logger

logger = get_logger(__name__)

IMPLICIT_TLS_PORT = 465


class EmailService:
    """
    Plain-text email sender.

    Usage:
    ------
    mailer = EmailService()
    await mailer.send(to="reader@example.com", subject="Password reset", body="...")
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username or settings.SMTP_USER
        self.password = password or settings.SMTP_PASSWORD
        self.from_email = from_email or settings.FROM_EMAIL
        self.from_name = from_name or settings.FROM_NAME
        self.timeout = timeout or settings.SMTP_TIMEOUT

    @property
    def configured(self) -> bool:
        return bool(self.host and self.from_email)

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.from_name, self.from_email or ""))
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    async def send(self, to: str, subject: str, body: str) -> None:
        """
        Send a plain-text email.

        Raises:
            EmailDeliveryError: SMTP is not configured or the send failed
        """
        if not self.configured:
            logger.error("email_not_configured", subject=subject)
            raise EmailDeliveryError()

        message = self.build_message(to, subject, body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_send_failed", error=str(e), error_type=type(e).__name__, subject=subject)
            raise EmailDeliveryError() from e

        logger.info("email_sent", subject=subject)

    def _deliver(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        if self.port == IMPLICIT_TLS_PORT:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context) as smtp:
                self._login_and_send(smtp, message)
            return

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls(context=context)
                smtp.ehlo()
            self._login_and_send(smtp, message)

    def _login_and_send(self, smtp: smtplib.SMTP, message: EmailMessage) -> None:
        if self.username and self.password:
            smtp.login(self.username, self.password)
        smtp.send_message(message)
