# eventhub/api/v1/endpoints/host.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.api import deps
from eventhub.core.actor import Actor
from eventhub.schemas.event import Event, EventCreate
from eventhub.schemas.profile import CanSubmitResponse
from eventhub.services import guard

router = APIRouter(prefix="/host", tags=["Host"])


@router.get("/events", response_model=List[Event])
def list_my_events(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    return crud.event.get_multi_by_host(db, host_id=actor.profile_id)


@router.post("/events", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: EventCreate,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """
    Submit a new event for review.

    Non-admin hosts are limited to a few active submissions per day and
    always create free events.
    """
    return guard.submit_event(db, actor, event_in)


@router.get("/can-submit", response_model=CanSubmitResponse)
def can_submit(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    quota = guard.get_submission_quota(db, actor)
    return CanSubmitResponse(
        canSubmit=quota.can_submit,
        currentCount=quota.current_count,
        maxLimit=quota.max_limit,
        submittedToday=quota.submitted_today,
    )
