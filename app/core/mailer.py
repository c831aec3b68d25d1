"""Outbound e-mail over SMTP.

Send failures never raise: the caller gets a DeliveryResult and the
error is logged here.
"""
import hashlib
from email.message import EmailMessage

import aiosmtplib

from app.core.config import Settings, settings
from app.shared.schemas.delivery import DeliveryResult
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


def mask_email(email: str) -> str:
    return hashlib.sha256(email.lower().encode("utf-8")).hexdigest()[:12]


class Mailer:
    def __init__(self, config: Settings = settings):
        self.config = config

    async def send_email(self, to: str, subject: str, html: str) -> DeliveryResult:
        if not self.config.smtp_configured:
            logger.warning("SMTP not configured, skipping email to %s", mask_email(to))
            return DeliveryResult.skipped("smtp_not_configured")

        msg = EmailMessage()
        msg["From"] = self.config.SMTP_FROM_EMAIL
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(html, subtype="html")

        # STARTTLS on 587, implicit TLS on 465
        start_tls = self.config.SMTP_TLS and self.config.SMTP_PORT == 587
        use_tls = self.config.SMTP_TLS and self.config.SMTP_PORT == 465
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.config.SMTP_HOST,
                port=self.config.SMTP_PORT,
                username=self.config.SMTP_USER,
                password=self.config.SMTP_PASSWORD,
                start_tls=start_tls,
                use_tls=use_tls,
            )
        except Exception as e:
            logger.error("Failed to send email to %s: %s", mask_email(to), e)
            return DeliveryResult.failed(str(e))

        logger.info("Email sent to %s", mask_email(to))
        return DeliveryResult.delivered()
