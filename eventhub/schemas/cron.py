# eventhub/schemas/cron.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class SweepJob(str, Enum):
    expire = "expire"
    complete = "complete"


class TriggerSource(str, Enum):
    http_cron = "http_cron"
    scheduler = "scheduler"
    manual = "manual"


class SweepResult(BaseModel):
    success: bool
    job: SweepJob
    events_affected: int
    duration_ms: int
    message: str


class CronLog(BaseModel):
    id: str
    job_name: str
    job_type: SweepJob
    status: str
    events_affected: int
    duration_ms: Optional[int] = None
    error_message: Optional[str] = None
    triggered_by: str
    executed_at: datetime

    model_config = {"from_attributes": True}


class CronLogStats(BaseModel):
    total_executions: int
    successful: int
    failed: int
    last_execution: Optional[datetime] = None


class CronLogList(BaseModel):
    logs: List[CronLog]
    stats: CronLogStats
