# eventhub/api/v1/endpoints/public.py
"""
Public, unauthenticated event discovery.

Responses use ``EventPublic``, which has no meeting link or venue address.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.api import deps
from eventhub.schemas.event import EventListType, EventPublic, LocationType
from eventhub.utils.time import utcnow

router = APIRouter(tags=["Public"])


@router.get("/events", response_model=List[EventPublic])
def list_events(
    type: EventListType = Query(EventListType.upcoming),
    location_type: Optional[LocationType] = Query(None),
    db: Session = Depends(deps.get_db),
):
    return crud.event.get_multi_public(
        db, list_type=type, location_type=location_type, now=utcnow()
    )


@router.get("/events/{event_id}", response_model=EventPublic)
def get_event(event_id: str, db: Session = Depends(deps.get_db)):
    event = crud.event.get_public(db, event_id=event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Event not found"
        )
    return event
