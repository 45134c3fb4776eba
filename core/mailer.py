"""
SMTP mail delivery.

Messages go out through a single configured relay. Callers decide whether a
delivery failure matters; this module only raises MailerError.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from functools import lru_cache
from typing import Optional

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MailerError(Exception):
    """Raised when a message cannot be delivered."""


class Mailer:
    def __init__(self, settings: Settings):
        self.settings = settings

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        """
        Send a plaintext message, with an optional HTML alternative.

        Raises:
            MailerError: If SMTP is not configured or the relay refuses the message
        """
        settings = self.settings
        if not settings.smtp_configured:
            raise MailerError(
                "SMTP config incomplete: ensure SMTP_HOST, SMTP_PORT, SMTP_USER, "
                "SMTP_PASS, and SMTP_FROM_EMAIL are set."
            )

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = settings.SMTP_FROM_EMAIL
        msg["To"] = to
        msg.attach(MIMEText(text, "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))

        try:
            context = ssl.create_default_context()
            if settings.smtp_use_ssl:
                server = smtplib.SMTP_SSL(
                    settings.SMTP_HOST, settings.SMTP_PORT, context=context, timeout=settings.SMTP_TIMEOUT
                )
            else:
                server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT)

            with server:
                if not settings.smtp_use_ssl:
                    server.starttls(context=context)
                server.login(settings.SMTP_USER, settings.SMTP_PASS)
                server.sendmail(settings.SMTP_FROM_EMAIL, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send to {to} failed: {e}")
            raise MailerError(f"SMTP send failed: {e}") from e

        logger.info(f"Email sent to {to}: {subject}")


@lru_cache()
def get_mailer() -> Mailer:
    """FastAPI dependency returning the shared mailer."""
    return Mailer(get_settings())
