# eventhub/crud/crud_cron_log.py
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventhub.crud.base import CRUDBase
from eventhub.models.cron_log import CronLog
from eventhub.schemas.cron import CronLog as CronLogSchema
from eventhub.schemas.cron import CronLogStats, SweepJob


class CRUDCronLog(CRUDBase[CronLog, CronLogSchema, CronLogSchema]):
    def record(
        self,
        db: Session,
        *,
        job_name: str,
        job_type: SweepJob,
        status: str,
        events_affected: int,
        duration_ms: int,
        triggered_by: str,
        error_message: Optional[str] = None,
    ) -> CronLog:
        db_obj = self.model(
            job_name=job_name,
            job_type=job_type.value,
            status=status,
            events_affected=events_affected,
            duration_ms=duration_ms,
            error_message=error_message,
            triggered_by=triggered_by,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_recent(
        self, db: Session, *, job_type: Optional[SweepJob] = None, limit: int = 50
    ) -> list[CronLog]:
        query = db.query(self.model)
        if job_type is not None:
            query = query.filter(self.model.job_type == job_type.value)
        return query.order_by(self.model.executed_at.desc()).limit(limit).all()

    def get_stats(
        self, db: Session, *, job_type: Optional[SweepJob] = None
    ) -> CronLogStats:
        query = db.query(self.model.status, func.count(self.model.id))
        last_query = db.query(func.max(self.model.executed_at))
        if job_type is not None:
            query = query.filter(self.model.job_type == job_type.value)
            last_query = last_query.filter(self.model.job_type == job_type.value)

        counts = dict(query.group_by(self.model.status).all())
        return CronLogStats(
            total_executions=sum(counts.values()),
            successful=counts.get("success", 0),
            failed=counts.get("error", 0),
            last_execution=last_query.scalar(),
        )


cron_log = CRUDCronLog(CronLog)
