"""
Outgoing email for account flows.

Messages go through the SMTP server named by SMTP_HOST. Without one, the
message is written to the log instead so local setups still work.
"""
import logging
import smtplib
from email.message import EmailMessage

from utils import config

logger = logging.getLogger(__name__)


def _send_email(subject: str, body: str, recipient_email: str) -> bool:
    """
    Core helper: send a plain-text email.

    Returns True on success, False on failure.
    """
    if not config.SMTP_HOST:
        logger.info('SMTP not configured; email "%s" to %s:\n%s', subject, recipient_email, body)
        return True

    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = config.MAIL_FROM
    message["To"] = recipient_email
    message.set_content(body)

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=10) as server:
            server.starttls()
            if config.SMTP_USER:
                server.login(config.SMTP_USER, config.SMTP_PASSWORD or "")
            server.send_message(message)
        logger.info('Email "%s" sent successfully to %s', subject, recipient_email)
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.error('Failed to send email "%s" to %s: %s', subject, recipient_email, exc, exc_info=True)
        return False


def send_password_reset_email(user, reset_token: str) -> bool:
    """
    Send a password reset link.

    Args:
        user: User model instance (needs .email and .display_name)
        reset_token: Signed reset token for the link

    Returns:
        True if the message was handed off
    """
    reset_url = f"{config.FRONTEND_URL}/reset-password?token={reset_token}"
    body = (
        f"Hi {user.display_name},\n\n"
        f"We received a request to reset your password. Use the link below within "
        f"{config.RESET_TOKEN_EXPIRE_MINUTES} minutes:\n\n{reset_url}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    return _send_email("Reset your password", body, user.email)
