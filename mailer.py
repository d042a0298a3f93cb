"""
Transactional email for the two forms.

Messages are composed as HTML and delivered over SMTP. Sending is a no-op
when no SMTP host is configured.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import List, Optional

from config import Settings, get_settings
from schemas import Booking, Contact

logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    from_name: str
    from_email: str
    to: str
    subject: str
    html_body: str

    def to_mime(self) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = self.subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = self.to
        msg.attach(MIMEText(self.html_body, "html"))
        return msg


def send_email(message: EmailMessage, settings: Optional[Settings] = None) -> None:
    """Deliver one message. Raises smtplib/OS errors on failure."""
    settings = settings or get_settings()
    if not settings.email_host:
        logger.warning("EMAIL_HOST not set, skipping email %r to %s", message.subject, message.to)
        return

    if settings.email_secure:
        server = smtplib.SMTP_SSL(settings.email_host, settings.email_port, timeout=15)
    else:
        server = smtplib.SMTP(settings.email_host, settings.email_port, timeout=15)

    with server:
        if not settings.email_secure:
            server.starttls()
        if settings.email_user and settings.email_pass:
            server.login(settings.email_user, settings.email_pass)
        server.sendmail(message.from_email, [message.to], message.to_mime().as_string())
    logger.info("Sent email %r to %s", message.subject, message.to)


def _field(value: Optional[str]) -> str:
    return escape(value or "")


def _rows(pairs) -> str:
    return "".join(f"<p><b>{label}:</b> {_field(value)}</p>" for label, value in pairs)


def contact_emails(contact: Contact, settings: Settings) -> List[EmailMessage]:
    brand = settings.brand_name
    admin = EmailMessage(
        from_name=f"{brand} Contact",
        from_email=settings.from_email,
        to=settings.admin_inbox or settings.from_email,
        subject="📩 New Contact Request",
        html_body="<h2>New Contact</h2>" + _rows([
            ("Name", contact.name),
            ("Company", contact.company),
            ("Email", contact.email),
            ("Source", contact.source),
            ("Message", contact.message),
        ]),
    )
    reply = EmailMessage(
        from_name=f"{brand} Team",
        from_email=settings.from_email,
        to=contact.email or "",
        subject="✅ We received your message",
        html_body=f"<p>Thank you {_field(contact.name)}, we will contact you shortly.</p>",
    )
    return [admin, reply]


def booking_emails(booking: Booking, settings: Settings) -> List[EmailMessage]:
    brand = settings.brand_name
    admin = EmailMessage(
        from_name=f"{brand} Booking",
        from_email=settings.from_email,
        to=settings.admin_inbox or settings.from_email,
        subject="📅 New Free Consultation Booking",
        html_body="<h2>New Consultation</h2>" + _rows([
            ("Name", booking.name),
            ("Company", booking.company),
            ("Email", booking.email),
            ("Phone", booking.phone),
            ("Date", booking.date),
            ("Time", booking.time),
        ]),
    )
    confirmation = EmailMessage(
        from_name=f"{brand} Team",
        from_email=settings.from_email,
        to=booking.email or "",
        subject="✅ Free Consultation Confirmed",
        html_body=(
            f"<p>Hi {_field(booking.name)},</p>"
            "<p>Your free consultation is confirmed.</p>"
            + _rows([
                ("Date", booking.date),
                ("Time", booking.time),
                ("Company", booking.company),
                ("Phone", booking.phone),
            ])
            + f"<p>{escape(brand)} Team</p>"
        ),
    )
    return [admin, confirmation]
