# eventhub/services/lifecycle/sweeper.py
"""
Time-based status sweeps.

``run_sweep`` does not care who invoked it: the HTTP cron endpoints, the
in-process scheduler and tests all call it the same way. Every run writes
exactly one cron log row; failing to write that row never fails the run.
"""
import logging
import time
from datetime import datetime
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.schemas.cron import SweepJob, SweepResult, TriggerSource
from eventhub.utils.time import utcnow

logger = logging.getLogger(__name__)

# job -> (log name, crud.event method, verb for the summary message)
SWEEP_JOBS: Dict[SweepJob, Tuple[str, str, str]] = {
    SweepJob.expire: ("expire-events", "expire_overdue", "Expired"),
    SweepJob.complete: ("complete-events", "complete_past", "Completed"),
}


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _record_execution(db: Session, **fields) -> None:
    try:
        crud.cron_log.record(db, **fields)
    except Exception as e:
        db.rollback()
        logger.warning(
            "Could not write cron log for %s: %s", fields.get("job_name"), e
        )


def run_sweep(
    db: Session,
    job: SweepJob,
    triggered_by: TriggerSource = TriggerSource.http_cron,
    now: Optional[datetime] = None,
) -> SweepResult:
    """Apply one batch transition and return how many events it moved."""
    job_name, method_name, verb = SWEEP_JOBS[job]
    apply_transition = getattr(crud.event, method_name)
    now = now or utcnow()
    started = time.monotonic()
    logger.info("Starting %s (triggered by %s)", job_name, triggered_by.value)

    try:
        affected = apply_transition(db, now=now)
        db.commit()
    except Exception as e:
        db.rollback()
        duration_ms = _elapsed_ms(started)
        logger.error("%s failed after %sms: %s", job_name, duration_ms, e, exc_info=True)
        _record_execution(
            db,
            job_name=job_name,
            job_type=job,
            status="error",
            events_affected=0,
            duration_ms=duration_ms,
            triggered_by=triggered_by.value,
            error_message=str(e),
        )
        return SweepResult(
            success=False,
            job=job,
            events_affected=0,
            duration_ms=duration_ms,
            message=f"{job_name} failed",
        )

    duration_ms = _elapsed_ms(started)
    logger.info("%s finished: %s events in %sms", job_name, affected, duration_ms)
    _record_execution(
        db,
        job_name=job_name,
        job_type=job,
        status="success",
        events_affected=affected,
        duration_ms=duration_ms,
        triggered_by=triggered_by.value,
    )
    return SweepResult(
        success=True,
        job=job,
        events_affected=affected,
        duration_ms=duration_ms,
        message=f"{verb} {affected} events",
    )
