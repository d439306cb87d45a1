# eventhub/api/v1/endpoints/admin.py
import csv
import io
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.api import deps
from eventhub.core.actor import Actor
from eventhub.schemas.cron import CronLogList, SweepJob
from eventhub.schemas.event import (
    AdminEvent,
    AdminStats,
    Event,
    EventRejectRequest,
    EventStatus,
    ReviewResponse,
)
from eventhub.schemas.member import HostVerification
from eventhub.services import members
from eventhub.services.lifecycle import review
from eventhub.utils.slug import slugify
from eventhub.utils.time import utcnow

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/events", response_model=List[AdminEvent])
def list_events(
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(deps.get_db),
    admin: Actor = Depends(deps.require_admin),
):
    return crud.event.get_multi_for_admin(db, status=status_filter, limit=limit)


@router.get("/stats", response_model=AdminStats)
def get_stats(
    db: Session = Depends(deps.get_db),
    admin: Actor = Depends(deps.require_admin),
):
    counts = crud.event.count_by_status(db)
    recent = crud.event.get_multi_for_admin(db, status=EventStatus.submitted, limit=5)
    return AdminStats(
        pending=counts[EventStatus.submitted.value],
        published=counts[EventStatus.published.value],
        rejected=counts[EventStatus.rejected.value],
        expired=counts[EventStatus.expired.value],
        completed=counts[EventStatus.completed.value],
        total_registrations=crud.registration.count_settled(db),
        recent_submissions=[AdminEvent.model_validate(e) for e in recent],
    )


# Admin capability for reviews is checked inside the review workflow.
@router.post("/events/{event_id}/approve", response_model=ReviewResponse)
def approve_event(
    event_id: str,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    event = review.approve_event(db, actor, event_id)
    return ReviewResponse(event=Event.model_validate(event))


@router.post("/events/{event_id}/reject", response_model=ReviewResponse)
def reject_event(
    event_id: str,
    body: EventRejectRequest,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    event = review.reject_event(db, actor, event_id, body.reason)
    return ReviewResponse(event=Event.model_validate(event))


@router.get("/verify-host/{host_id}", response_model=HostVerification)
def verify_host(
    host_id: str,
    db: Session = Depends(deps.get_db),
    admin: Actor = Depends(deps.require_admin),
):
    """Whether the host appears on the verified member roster, and how."""
    return members.verify_host(db, host_id)


@router.get("/events/{event_id}/export-rsvp")
def export_rsvp(
    event_id: str,
    db: Session = Depends(deps.get_db),
    admin: Actor = Depends(deps.require_admin),
):
    """CSV of settled registrations, oldest first, split into known members and new leads."""
    event = crud.event.get(db, id=event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Event not found"
        )
    registrations = crud.registration.get_settled_by_event(db, event_id=event.id)
    if not registrations:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No registrations found"
        )

    community, leads = members.split_by_membership(db, registrations)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Event", event.title])
    writer.writerow(["Export Date", utcnow().isoformat()])
    writer.writerow(["Total Registrations", len(registrations)])
    for heading, rows in (("COMMUNITY MEMBERS", community), ("NEW LEADS", leads)):
        writer.writerow([])
        writer.writerow([f"=== {heading} ==="])
        writer.writerow(["Total", len(rows)])
        writer.writerow(["Name", "Email", "Registered At"])
        for reg in rows:
            writer.writerow(
                [reg.attendee_name, reg.attendee_email, reg.registered_at.isoformat()]
            )
    output.seek(0)

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="rsvp-{slugify(event.title)}.csv"'
        },
    )


@router.get("/cron/logs", response_model=CronLogList)
def list_cron_logs(
    job_type: Optional[SweepJob] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(deps.get_db),
    admin: Actor = Depends(deps.require_admin),
):
    return CronLogList(
        logs=crud.cron_log.get_recent(db, job_type=job_type, limit=limit),
        stats=crud.cron_log.get_stats(db, job_type=job_type),
    )
