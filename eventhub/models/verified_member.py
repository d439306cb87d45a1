# eventhub/models/verified_member.py
import uuid

from sqlalchemy import Column, DateTime, String

from eventhub.db.base_class import Base
from eventhub.utils.time import utcnow


class VerifiedMember(Base):
    """A known community member, imported from cohort rosters."""

    __tablename__ = "verified_members"

    id = Column(
        String, primary_key=True, default=lambda: f"vm_{uuid.uuid4().hex[:12]}"
    )
    full_name = Column(String, nullable=False)
    # Stored lower-cased and trimmed.
    email = Column(String, nullable=False, unique=True)
    cohort = Column(String, nullable=False)  # e.g. "Cohort 3"
    created_at = Column(DateTime, nullable=False, default=utcnow)
