# eventhub/services/registration/notifications.py
from typing import Any, Dict

from eventhub.core.email import send_registration_confirmation
from eventhub.models.event import Event
from eventhub.models.registration import Registration


def build_confirmation_email(registration: Registration, event: Event) -> Dict[str, Any]:
    """
    Snapshot everything the email needs while the session is still open, so
    the send can run as a background task after the response.
    """
    paid = registration.payment_status == "paid"
    return {
        "to_email": registration.attendee_email,
        "attendee_name": registration.attendee_name,
        "event_title": event.title,
        "event_date": event.event_date,
        "location_type": event.location_type,
        "registration_id": registration.id,
        "city": event.city,
        "venue_address": event.venue_address,
        "meeting_link": event.meeting_link,
        "amount_paise": registration.amount_paid if paid else None,
        "payment_reference": registration.razorpay_payment_id if paid else None,
    }


def send_confirmation(email_kwargs: Dict[str, Any]) -> None:
    send_registration_confirmation(**email_kwargs)
