# service/email_service.py
import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from config.settings import Settings
from util.enums import EmailProvider, ErrorMessage
from util.errors import EmailDeliveryError
from util.timing import timed

logger = logging.getLogger(__name__)


class EmailService:
    """
    Outbound mail for access tokens.

    Providers:
    - mock: logs the send and succeeds (dev/test).
    - smtp: blocking smtplib delivery offloaded to a worker thread.
    """

    def __init__(self, settings: Settings) -> None:
        self.provider = settings.EMAIL_PROVIDER
        self.sender = settings.EMAIL_FROM
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_use_tls = settings.SMTP_USE_TLS
        logger.info("email.init provider=%s", self.provider)

    async def send(self, to_email: str, subject: str, body: str) -> None:
        if self.provider == EmailProvider.MOCK:
            logger.info("email.mock.sent to=%s subject=%s", to_email, subject)
            return
        if self.provider != EmailProvider.SMTP:
            logger.error("email.unsupported_provider provider=%s", self.provider)
            raise EmailDeliveryError.of(ErrorMessage.EMAIL_FAILED)

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to_email
        try:
            with timed(logger, "email.smtp"):
                await asyncio.to_thread(self._deliver_smtp_message, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email.smtp.error to=%s err=%s", to_email, e)
            raise EmailDeliveryError.of(ErrorMessage.EMAIL_FAILED) from e
        logger.info("email.smtp.sent to=%s", to_email)

    def _deliver_smtp_message(self, message: MIMEText) -> None:
        """Blocking SMTP delivery executed in a worker thread."""
        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
            if self.smtp_use_tls:
                server.starttls()
            if self.smtp_username and self.smtp_password:
                server.login(self.smtp_username, self.smtp_password)
            server.send_message(message)

    async def send_access_token(self, to_email: str, token: str, validity_seconds: int) -> None:
        hours = max(1, validity_seconds // 3600)
        body = (
            "Here is your access token:\n\n"
            f"{token}\n\n"
            f"It can be used once and expires in {hours} hour(s).\n"
            "If you did not request it, ignore this email.\n"
        )
        await self.send(to_email, "Your access token", body)
