import uuid
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from eventhub.models.event import Event
from eventhub.models.profile import Profile
from eventhub.utils.time import utcnow
from tests.utils.profile import create_profile

DESCRIPTION = (
    "A hands-on community session covering the basics, with time for "
    "questions and networking afterwards."
)


def event_payload(**overrides) -> dict:
    """JSON body accepted by POST /host/events."""
    data = {
        "title": f"Community Meetup {uuid.uuid4().hex[:8]}",
        "description": DESCRIPTION,
        "event_date": (utcnow() + timedelta(days=14)).isoformat(),
        "location_type": "online",
        "meeting_link": "https://meet.example.com/abc-defg-hij",
        "max_capacity": 50,
    }
    data.update(overrides)
    return data


def create_random_event(
    db: Session,
    *,
    host: Profile = None,
    status: str = "published",
    max_capacity: int = 5,
    current_registrations: int = 0,
    price: int = 0,
    event_date: datetime = None,
    created_at: datetime = None,
    expires_at: datetime = None,
    location_type: str = "online",
) -> Event:
    """
    Inserts an event directly, bypassing the submission guard.
    """
    host = host or create_profile(db)
    now = utcnow()
    created_at = created_at or now
    event = Event(
        host_id=host.id,
        title=f"Test Event {uuid.uuid4().hex[:8]}",
        description=DESCRIPTION,
        event_date=event_date or now + timedelta(days=10),
        location_type=location_type,
        city="Bengaluru" if location_type != "online" else None,
        venue_address="12 MG Road" if location_type == "offline" else None,
        meeting_link="https://meet.example.com/secret-room"
        if location_type != "offline"
        else None,
        max_capacity=max_capacity,
        current_registrations=current_registrations,
        price=price,
        status=status,
        created_at=created_at,
        submitted_at=created_at,
        expires_at=expires_at or created_at + timedelta(days=7),
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event
