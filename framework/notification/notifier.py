from __future__ import annotations

from typing import Optional
from email.message import EmailMessage

from framework.config import settings
from framework.logging.logger import get_logger

logger = get_logger("notifier")


async def send_email(email_to: Optional[str], subject: str, body: str) -> bool:
    """
    Send a plain-text mail. Never raises: failures are logged and reported as False.
    - email_to empty: do not send, return False
    - NOTIFICATION_DRIVER=mock: log only, return True
    - NOTIFICATION_DRIVER=email: send via SMTP
    """
    if not email_to:
        return False

    driver = (settings.NOTIFICATION_DRIVER or "mock").lower()
    subject = f"[{settings.APP_NAME}] {subject}"

    if driver == "mock":
        logger.info(f"[MOCK] send email to={email_to} subject={subject!r}")
        return True

    if driver != "email":
        logger.warning(f"Unsupported NOTIFICATION_DRIVER={settings.NOTIFICATION_DRIVER!r}, skip sending")
        return False

    # email driver
    if not settings.SMTP_HOST or not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        logger.warning("SMTP not configured (SMTP_HOST/SMTP_USER/SMTP_PASSWORD missing), skip sending")
        return False

    msg = EmailMessage()
    msg["From"] = settings.SMTP_USER
    msg["To"] = email_to
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        import aiosmtplib

        await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT or 587,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            start_tls=True,
        )
        logger.info(f"Email sent to={email_to} subject={subject!r}")
        return True
    except Exception as e:
        logger.warning(f"Failed to send email to={email_to}: {str(e)}")
        return False


async def send_verification_email(email_to: str, name: str, token: str) -> bool:
    link = f"{settings.EMAIL_VERIFICATION_URL}?token={token}"
    body = "\n".join([
        f"Hello {name},",
        "",
        "Please confirm your e-mail address by opening the link below:",
        link,
        "",
        f"The link expires in {settings.EMAIL_VERIFICATION_EXPIRE_HOURS} hours.",
    ]) + "\n"
    return await send_email(email_to, "Verify your e-mail address", body)


async def send_facility_approved_email(email_to: Optional[str], facility_name: str) -> bool:
    body = "\n".join([
        f"Your facility '{facility_name}' has been approved.",
        "",
        "You can now sign in and start your accreditation work.",
    ]) + "\n"
    return await send_email(email_to, "Facility approved", body)
