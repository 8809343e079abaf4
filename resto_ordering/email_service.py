"""
Email service for trial lifecycle notifications.

Sends real emails via SMTP when configured, falls back to logging in mock mode.

Templates:
- "trial_expiring": reminder sent a few days before the trial ends
- "trial_expired": sent once when the trial has ended and ordering is paused

Environment variables:
- SMTP_HOST: SMTP server hostname (e.g., smtp.gmail.com)
- SMTP_PORT: SMTP server port (default: 587 for TLS)
- SMTP_USERNAME: SMTP authentication username
- SMTP_PASSWORD: SMTP authentication password
- SMTP_FROM_EMAIL: Sender email address
"""

import logging
import os
import smtplib
import ssl
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)

# SMTP configuration from environment
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")

TRIAL_EXPIRING = "trial_expiring"
TRIAL_EXPIRED = "trial_expired"


def is_email_configured() -> bool:
    """Check if SMTP is properly configured."""
    return all([SMTP_HOST, SMTP_USERNAME, SMTP_PASSWORD, SMTP_FROM_EMAIL])


def build_trial_email(template: str, restaurant_name: str, days_left: Optional[int] = None) -> tuple:
    """Return (subject, body) for a trial template."""
    if template == TRIAL_EXPIRING:
        plural = "s" if days_left != 1 else ""
        subject = f"{restaurant_name}: your free trial ends in {days_left} day{plural}"
        body = f"""Hi,

The free trial of {restaurant_name} ends in {days_left} day{plural}.

Choose a plan now to keep taking online orders without interruption.
"""
        return subject, body

    if template == TRIAL_EXPIRED:
        subject = f"{restaurant_name}: your free trial has ended"
        body = f"""Hi,

The free trial of {restaurant_name} has ended and online ordering is paused.

Choose a plan to reopen your storefront to orders.
"""
        return subject, body

    raise ValueError(f"Unknown email template: {template}")


def send_trial_email(
    template: str,
    to_email: str,
    restaurant_name: str,
    days_left: Optional[int] = None,
) -> dict:
    """
    Send a trial lifecycle email to the restaurant owner.

    Args:
        template: TRIAL_EXPIRING or TRIAL_EXPIRED
        to_email: Owner's email address
        restaurant_name: Used in subject and body
        days_left: Days remaining (TRIAL_EXPIRING only)

    Returns:
        dict with status ("sent" or "error") and details
    """
    subject, body_text = build_trial_email(template, restaurant_name, days_left)

    if not is_email_configured():
        logger.info("MOCK EMAIL to %s: Subject: %s", to_email, subject)
        return {
            "status": "sent",
            "to_email": to_email,
            "subject": subject,
            "mock": True,
        }

    try:
        msg = MIMEText(body_text, "plain")
        msg["Subject"] = subject
        msg["From"] = SMTP_FROM_EMAIL
        msg["To"] = to_email

        context = ssl.create_default_context()
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT) as server:
            server.starttls(context=context)
            server.login(SMTP_USERNAME, SMTP_PASSWORD)
            server.sendmail(SMTP_FROM_EMAIL, to_email, msg.as_string())

        logger.info("Email '%s' sent to %s", template, to_email)
        return {
            "status": "sent",
            "to_email": to_email,
            "subject": subject,
            "mock": False,
        }

    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send '%s' email to %s: %s", template, to_email, str(e))
        return {
            "status": "error",
            "to_email": to_email,
            "error": str(e),
            "mock": False,
        }
