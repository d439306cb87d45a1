# eventhub/models/profile.py
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, text

from eventhub.db.base_class import Base
from eventhub.utils.time import utcnow


class Profile(Base):
    """A signed-in member. Hosts and admins share this table."""

    __tablename__ = "profiles"

    # Matches the ``sub`` claim of the identity provider's session token.
    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, index=True)
    full_name = Column(String, nullable=True)
    affiliation = Column(String, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    # Daily submission counter, reset when submissions_date moves on.
    submissions_date = Column(Date, nullable=True)
    submissions_today = Column(Integer, nullable=False, default=0, server_default=text("0"))

    created_at = Column(DateTime, nullable=False, default=utcnow)
