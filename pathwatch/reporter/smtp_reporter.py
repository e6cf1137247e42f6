"""SMTP email alerts for PathWatch."""

import html
import logging
import re
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from .base import BaseAlertReporter, ConfigurationError

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


class SMTPAlertReporter(BaseAlertReporter):
    """
    SMTP-based alert reporter.

    Sends replay failure alerts to a single configured recipient.
    """

    platform_name = "smtp"

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        from_email: str = "",
        to_email: str = "",
        use_tls: bool = True,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or f'"Replay Bot" <{username}>'
        self.to_email = to_email
        self.use_tls = use_tls

        self._configured = bool(host and port and to_email)

    def is_configured(self) -> bool:
        return self._configured

    @staticmethod
    def _html_to_text(body_html: str) -> str:
        text = html.unescape(_TAG_RE.sub("", body_html or ""))
        lines = [line.strip() for line in text.splitlines()]
        return "\n".join(line for line in lines if line)

    def build_message(self, subject: str, body_html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.from_email
        msg["To"] = self.to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(self._html_to_text(body_html), "plain", "utf-8"))
        msg.attach(MIMEText(body_html, "html", "utf-8"))
        return msg

    async def send(self, subject: str, body_html: str) -> bool:
        """
        Send an alert email via SMTP.

        Returns True if successful.
        """
        if not self._configured:
            raise ConfigurationError("SMTP not configured")

        msg = self.build_message(subject, body_html)

        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=self.use_tls,
            )
            logger.info(f"Alert email sent to {self.to_email}: {subject}")
            return True

        except aiosmtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            raise ConfigurationError(f"SMTP authentication failed: {e}")

        except Exception as e:
            logger.exception(f"SMTP send failed: {e}")
            return False
