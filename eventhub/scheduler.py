# eventhub/scheduler.py
"""
In-process scheduler for the status sweeps.

Runs the same sweeps as the ``/cron`` endpoints, for deployments without an
external cron. Enabled with ``SCHEDULER_ENABLED``.
"""

import logging

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from eventhub.db.session import SessionLocal
from eventhub.schemas.cron import SweepJob, TriggerSource
from eventhub.services.lifecycle.sweeper import run_sweep

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def _on_job_error(event):
    """Log scheduler job errors with full context."""
    exc = event.exception
    logger.error(
        "Scheduled job FAILED: job_id=%s error=%s",
        event.job_id,
        exc,
        exc_info=(type(exc), exc, None) if exc else None,
    )
    if event.traceback:
        logger.error("Traceback for job %s:\n%s", event.job_id, event.traceback)


def _on_job_missed(event):
    """Log when a scheduled job misses its execution window."""
    logger.warning(
        "Scheduled job MISSED: job_id=%s scheduled_run_time=%s",
        event.job_id,
        event.scheduled_run_time,
    )


def run_scheduled_sweep(job: SweepJob):
    db = SessionLocal()
    try:
        return run_sweep(db, job, triggered_by=TriggerSource.scheduler)
    finally:
        db.close()


def init_scheduler():
    """
    Start the background scheduler with both sweeps. Called once on startup.
    """
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return scheduler

    scheduler = BackgroundScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,  # Combine missed executions
            "max_instances": 1,
            "misfire_grace_time": 300,
        },
    )

    # Daily at 19:30 UTC (01:00 IST)
    scheduler.add_job(
        func=run_scheduled_sweep,
        args=[SweepJob.expire],
        trigger=CronTrigger(hour=19, minute=30, timezone="UTC"),
        id="expire_events",
        name="Expire Unreviewed Submissions",
        replace_existing=True,
    )
    logger.info("Scheduled job: expire_events (daily 19:30 UTC)")

    # Daily at 20:30 UTC (02:00 IST)
    scheduler.add_job(
        func=run_scheduled_sweep,
        args=[SweepJob.complete],
        trigger=CronTrigger(hour=20, minute=30, timezone="UTC"),
        id="complete_events",
        name="Complete Past Events",
        replace_existing=True,
    )
    logger.info("Scheduled job: complete_events (daily 20:30 UTC)")

    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    scheduler.add_listener(_on_job_missed, EVENT_JOB_MISSED)

    scheduler.start()
    logger.info("Background scheduler started successfully")

    return scheduler


def shutdown_scheduler():
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler shutdown complete")
        scheduler = None
