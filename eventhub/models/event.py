# eventhub/models/event.py
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import relationship

from eventhub.db.base_class import Base
from eventhub.utils.time import utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(
        String, primary_key=True, default=lambda: f"evt_{uuid.uuid4().hex[:12]}"
    )
    host_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    event_date = Column(DateTime, nullable=False, index=True)

    location_type = Column(String(10), nullable=False)  # online, offline, hybrid
    city = Column(String, nullable=True)
    venue_address = Column(String, nullable=True)
    meeting_link = Column(String, nullable=True)

    max_capacity = Column(Integer, nullable=False)
    # Only ever changed by conditional UPDATE statements in crud_event.
    current_registrations = Column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    price = Column(Integer, nullable=False, default=0, server_default=text("0"))  # INR
    image_url = Column(String, nullable=True)

    status = Column(String(20), nullable=False, default="submitted", index=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    submitted_at = Column(DateTime, nullable=False, default=utcnow)
    reviewed_at = Column(DateTime, nullable=True)
    reviewed_by = Column(String, ForeignKey("profiles.id"), nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    host = relationship("Profile", foreign_keys=[host_id])
    registrations = relationship(
        "Registration", back_populates="event", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("max_capacity > 0", name="ck_events_capacity_positive"),
        CheckConstraint("price >= 0", name="ck_events_price_non_negative"),
        CheckConstraint(
            "current_registrations >= 0", name="ck_events_registrations_non_negative"
        ),
    )
