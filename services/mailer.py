from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)


class MailerError(Exception):
    pass


class Mailer:
    """Blocking SMTP relay client; call through a threadpool from async code."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        sender: str = "",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender

    def build_message(self, to: str, subject: str, text: str, html: Optional[str] = None) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.set_content(text)
        msg.add_alternative(html or text.replace("\n", "<br />"), subtype="html")
        return msg

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        if not self.host:
            raise MailerError("SMTP_HOST not configured")

        msg = self.build_message(to, subject, text, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailerError(f"SMTP send failed: {e}") from e
        logger.info("Sent e-mail %r", subject)


def get_mailer() -> Mailer:
    return Mailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        sender=settings.mail_from,
    )
