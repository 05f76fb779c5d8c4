import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from alumni_app.config import settings

logger = logging.getLogger(__name__)

SENDER_NAME = "DU Alumni 89"
APPROVAL_SUBJECT = "Your DU Alumni 89 Membership Has Been Approved!"


def build_approval_message(to_email: str, full_name: str) -> MIMEMultipart:
    app_url = settings.APP_URL
    text_body = (
        f"Dear {full_name},\n\n"
        "Your membership application for DU Alumni '89 Connect has been reviewed "
        "and approved by our administrators.\n\n"
        "You now have full access to the photo gallery, the member directory, "
        "news and events, and blog posts.\n\n"
        f"Visit {app_url} to get started.\n\n"
        "Best regards,\nDU Alumni '89 Connect Team"
    )
    html_body = (
        "<html><body style=\"font-family: Arial, sans-serif;\">"
        "<h1>Congratulations!</h1>"
        f"<p>Dear <strong>{escape(full_name)}</strong>,</p>"
        "<p>Your membership application for <strong>DU Alumni '89 Connect</strong> "
        "has been reviewed and <strong>approved</strong> by our administrators.</p>"
        "<p>You now have full access to the photo gallery, the member directory, "
        "news and events, and blog posts.</p>"
        f"<p><a href=\"{escape(app_url)}\">Visit DU Alumni 89 Connect</a></p>"
        "<p>Best regards,<br><strong>DU Alumni '89 Connect Team</strong></p>"
        "</body></html>"
    )

    msg = MIMEMultipart("alternative")
    msg["Subject"] = APPROVAL_SUBJECT
    msg["From"] = f"\"{SENDER_NAME}\" <{settings.SMTP_FROM}>"
    msg["To"] = to_email
    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))
    return msg


def _deliver(msg: MIMEMultipart) -> None:
    if not settings.SMTP_USER or not settings.SMTP_PASS:
        raise RuntimeError("SMTP credentials not configured. Set SMTP_USER and SMTP_PASS.")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        server.login(settings.SMTP_USER, settings.SMTP_PASS)
        server.send_message(msg)


async def send_approval_email(to_email: str, full_name: str) -> None:
    msg = build_approval_message(to_email, full_name)
    await asyncio.to_thread(_deliver, msg)
    logger.info("Approval email sent to %s", to_email)


def get_mailer():
    return send_approval_email
