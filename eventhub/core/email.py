# eventhub/core/email.py
"""
Email service using Resend for sending transactional emails.

Sending is best effort: failures are logged and reported in the return value,
never raised, so a mail outage cannot fail a registration or a payment.
"""
import html
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import resend

from eventhub.core.config import settings

logger = logging.getLogger(__name__)

# Event times are shown to attendees in India Standard Time.
IST = timezone(timedelta(hours=5, minutes=30), name="IST")


def init_resend():
    """Initialize Resend with API key."""
    resend.api_key = settings.RESEND_API_KEY


def format_event_date(event_date: datetime) -> str:
    if event_date.tzinfo is None:
        event_date = event_date.replace(tzinfo=timezone.utc)
    local = event_date.astimezone(IST)
    return local.strftime("%A, %d %B %Y at %I:%M %p IST")


def location_label(location_type: str, city: Optional[str]) -> str:
    if location_type == "online":
        return "Online"
    if location_type == "offline":
        return city or "In-Person"
    return f"Hybrid - {city or 'In-Person + Online'}"


def send_registration_confirmation(
    *,
    to_email: str,
    attendee_name: str,
    event_title: str,
    event_date: datetime,
    location_type: str,
    registration_id: str,
    city: Optional[str] = None,
    venue_address: Optional[str] = None,
    meeting_link: Optional[str] = None,
    amount_paise: Optional[int] = None,
    payment_reference: Optional[str] = None,
) -> dict:
    """
    Send a registration confirmation email.

    Args:
        to_email: Recipient email address
        attendee_name: Name of the attendee
        event_title: Title of the event
        event_date: Scheduled date/time of the event (UTC)
        location_type: online, offline or hybrid
        registration_id: Registration the email confirms
        city, venue_address, meeting_link: Location details revealed to attendees
        amount_paise: Amount paid for paid events, omitted for free ones
        payment_reference: Gateway payment id for paid events

    Returns:
        {"success": True, "id": ...} or {"success": False, "error": ...}
    """
    init_resend()

    ticket_id = registration_id.split("_")[-1][:8].upper()
    rows = [
        f"<p><strong>Event:</strong> {html.escape(event_title)}</p>",
        f"<p><strong>When:</strong> {format_event_date(event_date)}</p>",
        f"<p><strong>Where:</strong> {html.escape(location_label(location_type, city))}</p>",
    ]
    if venue_address:
        rows.append(f"<p><strong>Venue:</strong> {html.escape(venue_address)}</p>")
    if meeting_link:
        link = html.escape(meeting_link, quote=True)
        rows.append(f'<p><strong>Join link:</strong> <a href="{link}">{link}</a></p>')
    if amount_paise:
        rows.append(f"<p><strong>Amount paid:</strong> Rs. {amount_paise / 100:,.2f}</p>")
    if payment_reference:
        rows.append(f"<p><strong>Payment ID:</strong> {html.escape(payment_reference)}</p>")

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #111;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="color: #F96846;">You're registered!</h1>
            <p>Hi {html.escape(attendee_name)},</p>
            <p>Your spot for <strong>{html.escape(event_title)}</strong> is confirmed.</p>
            <div style="border: 2px dashed #F96846; padding: 16px; text-align: center;">
                <p style="margin: 0; color: #555;">Ticket</p>
                <p style="font-size: 24px; font-weight: bold; letter-spacing: 3px;">{ticket_id}</p>
            </div>
            {''.join(rows)}
            <p>See you there!</p>
        </div>
    </body>
    </html>
    """

    params = {
        "from": settings.RESEND_FROM_EMAIL,
        "to": [to_email],
        "subject": f"Confirmed: {event_title}",
        "html": html_content,
    }

    try:
        response = resend.Emails.send(params)
        logger.info(
            "Registration confirmation sent to %s for event: %s", to_email, event_title
        )
        return {"success": True, "id": response.get("id") if response else None}
    except Exception as e:
        logger.error("Failed to send confirmation email to %s: %s", to_email, e)
        return {"success": False, "error": str(e)}
