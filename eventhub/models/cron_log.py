# eventhub/models/cron_log.py
import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text

from eventhub.db.base_class import Base
from eventhub.utils.time import utcnow


class CronLog(Base):
    """One row per sweep execution. Rows are never updated."""

    __tablename__ = "cron_logs"

    id = Column(
        String, primary_key=True, default=lambda: f"cron_{uuid.uuid4().hex[:12]}"
    )
    job_name = Column(String, nullable=False)
    job_type = Column(String(20), nullable=False, index=True)  # expire, complete
    status = Column(String(10), nullable=False)  # success, error
    events_affected = Column(Integer, nullable=False, default=0)
    duration_ms = Column(Integer, nullable=True)
    error_message = Column(Text, nullable=True)
    triggered_by = Column(String(20), nullable=False, default="http_cron")
    executed_at = Column(DateTime, nullable=False, default=utcnow, index=True)
