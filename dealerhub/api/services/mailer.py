"""
OTP Mailer
Delivers sign-in codes over SMTP.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ..config import APISettings, get_settings

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your verification code"


class MailDeliveryError(Exception):
    """Exception raised when an email could not be handed to the SMTP server."""

    pass


class OTPMailer:
    """Sends one-time codes by email."""

    def __init__(self, settings: Optional[APISettings] = None):
        self.settings = settings or get_settings()

    def _build_message(self, recipient: str, code: str, ttl_minutes: int) -> str:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = self.settings.mail_from
        msg["To"] = recipient

        text = (
            f"Your one-time password is {code}.\n\n"
            f"It is valid for the next {ttl_minutes} minutes. If you did not "
            f"request it, ignore this email."
        )
        html = (
            f"<p>Your one-time password is</p>"
            f"<p><strong style=\"font-size:24px\">{code}</strong></p>"
            f"<p>It is valid for the next {ttl_minutes} minutes. If you did not "
            f"request it, ignore this email.</p>"
        )
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))

        return msg.as_string()

    def send_otp(self, recipient: str, code: str) -> None:
        """
        Email a code to a user.

        Without SMTP_HOST configured nothing is sent (local development).

        Raises:
            MailDeliveryError: If the SMTP server rejects or drops the message
        """
        if not self.settings.smtp_host:
            logger.warning("SMTP_HOST is not configured; OTP email not sent")
            return

        ttl_minutes = max(1, self.settings.otp_ttl_seconds // 60)
        message = self._build_message(recipient, code, ttl_minutes)

        try:
            server = smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10)
            try:
                if self.settings.smtp_use_tls:
                    server.starttls()
                if self.settings.smtp_user and self.settings.smtp_password:
                    server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.sendmail(self.settings.mail_from, [recipient], message)
            finally:
                server.quit()
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Error sending email: {e}") from e

        logger.info(f"OTP email sent to user address ending {recipient[-4:]}")


def get_mailer() -> OTPMailer:
    return OTPMailer()
