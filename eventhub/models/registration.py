# eventhub/models/registration.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from eventhub.db.base_class import Base
from eventhub.utils.time import utcnow

SETTLED_PAYMENT_STATUSES = ("paid", "free")

_settled_clause = text("payment_status IN ('paid', 'free')")


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(
        String, primary_key=True, default=lambda: f"reg_{uuid.uuid4().hex[:12]}"
    )
    event_id = Column(
        String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attendee_name = Column(String(100), nullable=False)
    # Always stored lower-cased.
    attendee_email = Column(String, nullable=False, index=True)
    whatsapp_number = Column(String(20), nullable=True)
    registered_at = Column(DateTime, nullable=False, default=utcnow)

    payment_status = Column(String(10), nullable=False, default="free")  # free, pending, paid, failed
    razorpay_order_id = Column(String, nullable=True, unique=True)
    razorpay_payment_id = Column(String, nullable=True)
    amount_paid = Column(Integer, nullable=True)  # paise

    event = relationship("Event", back_populates="registrations")

    __table_args__ = (
        # One settled row per attendee; pending/failed attempts may coexist.
        Index(
            "uq_registrations_settled_event_email",
            "event_id",
            "attendee_email",
            unique=True,
            postgresql_where=_settled_clause,
            sqlite_where=_settled_clause,
        ),
    )
