import uuid

from sqlalchemy.orm import Session

from eventhub.models.event import Event
from eventhub.models.registration import Registration


def create_registration(
    db: Session,
    *,
    event: Event,
    email: str = None,
    payment_status: str = "free",
    order_id: str = None,
) -> Registration:
    registration = Registration(
        event_id=event.id,
        attendee_name="Test Attendee",
        attendee_email=email or f"attendee_{uuid.uuid4().hex[:8]}@example.com",
        payment_status=payment_status,
        razorpay_order_id=order_id,
        amount_paid=event.price * 100 if payment_status in ("pending", "paid") else None,
    )
    db.add(registration)
    db.commit()
    db.refresh(registration)
    return registration
