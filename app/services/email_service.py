from fastapi_mail import FastMail, MessageSchema, ConnectionConfig
from app.config import settings
from app.exceptions import DependencyFailure
from jinja2 import Environment, FileSystemLoader
import httpx
import logging
import os

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
TEMPLATE_DIR = os.path.join(BASE_DIR, "templates", "email")

BREVO_URL = "https://api.brevo.com/v3/smtp/email"
PROGRAMME_NAME = "AYuTe Africa Challenge Nigeria"

env = Environment(loader=FileSystemLoader(TEMPLATE_DIR), autoescape=True)


def _smtp_config(port: int) -> ConnectionConfig:
    """Two configs: STARTTLS on 587, implicit SSL on 465"""
    return ConnectionConfig(
        MAIL_USERNAME=settings.EMAIL_HOST_USER,
        MAIL_PASSWORD=settings.EMAIL_HOST_PASSWORD,
        MAIL_FROM=settings.EMAIL_FROM,
        MAIL_FROM_NAME=PROGRAMME_NAME,
        MAIL_PORT=port,
        MAIL_SERVER=settings.EMAIL_HOST,
        MAIL_STARTTLS=port != 465,
        MAIL_SSL_TLS=port == 465,
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
        TEMPLATE_FOLDER=TEMPLATE_DIR,
    )


async def _send_via_brevo(to_email: str, to_name: str, subject: str, html: str) -> None:
    payload = {
        "sender": {"name": settings.BREVO_SENDER_NAME, "email": settings.BREVO_SENDER_EMAIL},
        "to": [{"email": to_email, "name": to_name}],
        "subject": subject,
        "htmlContent": html,
    }
    try:
        async with httpx.AsyncClient(timeout=15) as client:
            response = await client.post(BREVO_URL, json=payload, headers={"api-key": settings.BREVO_API_KEY})
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise DependencyFailure(f"Brevo rejected {subject}: {str(e)}") from e


async def _send_via_smtp(to_email: str, subject: str, html: str) -> None:
    """Try sending via TLS first (587), then SSL (465) if it fails"""
    message = MessageSchema(
        subject=subject,
        recipients=[to_email],
        body=html,
        subtype="html"
    )
    try:
        await FastMail(_smtp_config(587)).send_message(message)
        logger.info(f"{subject} email sent to {to_email} via port 587")
        return
    except Exception as e:
        logger.warning(f"Failed to send {subject} via port 587: {str(e)}")
    try:
        await FastMail(_smtp_config(465)).send_message(message)
        logger.info(f"{subject} email sent to {to_email} via port 465")
    except Exception as e:
        raise DependencyFailure(f"SMTP failed for {subject} on both ports: {str(e)}") from e


async def send_email(to_email: str, to_name: str, subject: str, html: str) -> bool:
    """Deliver one HTML email. Returns False on any failure; never raises."""
    if not to_email:
        logger.error(f"Refusing to send {subject}: empty recipient")
        return False
    try:
        if settings.BREVO_API_KEY:
            await _send_via_brevo(to_email, to_name, subject, html)
        elif settings.EMAIL_HOST and settings.EMAIL_FROM:
            await _send_via_smtp(to_email, subject, html)
        else:
            raise DependencyFailure("No email transport configured")
    except DependencyFailure as e:
        logger.error(f"Failed to send {subject} email to {to_email}: {e.message}")
        return False
    except Exception as e:
        logger.error(f"Failed to build/send {subject} email to {to_email}: {str(e)}")
        return False
    logger.info(f"{subject} email sent to {to_email}")
    return True


async def send_verification_email(to_email: str, name: str, verification_url: str) -> bool:
    html = env.get_template("verify_email.html").render(
        name=name,
        verification_url=verification_url,
        programme=PROGRAMME_NAME,
        expire_hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS,
    )
    return await send_email(to_email, name, "Application Received", html)


async def send_submission_email(to_email: str, name: str, reference_number: str) -> bool:
    html = env.get_template("submission_received.html").render(
        name=name,
        reference_number=reference_number,
        programme=PROGRAMME_NAME,
    )
    return await send_email(to_email, name, "Application Received", html)
