# eventhub/crud/crud_event.py
"""
Event persistence.

Methods that take part in a larger unit of work (seat claims, review and
sweep transitions, creation) only flush; the calling service commits.
"""
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from eventhub.crud.base import CRUDBase
from eventhub.models.event import Event
from eventhub.schemas.event import EventCreate, EventListType, EventStatus, LocationType
from eventhub.services.lifecycle.status_engine import (
    ACTIVE_SUBMISSION_STATUSES,
    INITIAL_STATUS,
    PUBLIC_STATUSES,
    sweep_source,
)


class CRUDEvent(CRUDBase[Event, EventCreate, EventCreate]):
    def get_by_title(self, db: Session, *, title: str) -> Optional[Event]:
        return db.query(self.model).filter(self.model.title == title).first()

    def get_for_update(self, db: Session, *, event_id: str) -> Optional[Event]:
        """Lock the event row for the rest of the caller's transaction."""
        return (
            db.query(self.model)
            .filter(self.model.id == event_id)
            .with_for_update()
            .first()
        )

    def create_with_host(
        self,
        db: Session,
        *,
        obj_in: EventCreate,
        host_id: str,
        price: int,
        image_url: str,
        submitted_at: datetime,
        expires_at: datetime,
    ) -> Event:
        db_obj = self.model(
            **obj_in.model_dump(exclude={"price", "image_url"}),
            host_id=host_id,
            price=price,
            image_url=image_url,
            status=INITIAL_STATUS.value,
            current_registrations=0,
            created_at=submitted_at,
            submitted_at=submitted_at,
            expires_at=expires_at,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def get_public(self, db: Session, *, event_id: str) -> Optional[Event]:
        return (
            db.query(self.model)
            .filter(
                self.model.id == event_id,
                self.model.status.in_([s.value for s in PUBLIC_STATUSES]),
            )
            .first()
        )

    def get_multi_public(
        self,
        db: Session,
        *,
        list_type: EventListType,
        now: datetime,
        location_type: Optional[LocationType] = None,
    ) -> List[Event]:
        """Upcoming published events soonest first, or past events latest first."""
        query = db.query(self.model)
        if list_type == EventListType.upcoming:
            query = query.filter(
                self.model.status == EventStatus.published.value,
                self.model.event_date >= now,
            ).order_by(self.model.event_date.asc())
        else:
            query = query.filter(
                self.model.status.in_([s.value for s in PUBLIC_STATUSES]),
                self.model.event_date < now,
            ).order_by(self.model.event_date.desc())

        if location_type is not None:
            query = query.filter(self.model.location_type == location_type.value)
        return query.all()

    def get_multi_by_host(self, db: Session, *, host_id: str) -> List[Event]:
        return (
            db.query(self.model)
            .filter(self.model.host_id == host_id)
            .order_by(self.model.created_at.desc())
            .all()
        )

    def get_multi_for_admin(
        self, db: Session, *, status: Optional[EventStatus] = None, limit: int = 50
    ) -> List[Event]:
        query = db.query(self.model).options(joinedload(self.model.host))
        if status is not None:
            query = query.filter(self.model.status == status.value)
        return query.order_by(self.model.submitted_at.desc()).limit(limit).all()

    def count_by_status(self, db: Session) -> Dict[str, int]:
        rows = (
            db.query(self.model.status, func.count(self.model.id))
            .group_by(self.model.status)
            .all()
        )
        counts = {status.value: 0 for status in EventStatus}
        counts.update({status: count for status, count in rows})
        return counts

    def count_active_submissions(
        self, db: Session, *, host_id: str, day: date
    ) -> int:
        """Events the host created on ``day`` (UTC) that are still in flight."""
        start = datetime.combine(day, time.min)
        return (
            db.query(func.count(self.model.id))
            .filter(
                self.model.host_id == host_id,
                self.model.created_at >= start,
                self.model.created_at < start + timedelta(days=1),
                self.model.status.in_([s.value for s in ACTIVE_SUBMISSION_STATUSES]),
            )
            .scalar()
        )

    def claim_seat(self, db: Session, *, event_id: str) -> bool:
        """
        Take one seat if any is left. A single guarded UPDATE, so two requests
        racing for the last seat cannot both win.
        """
        count = (
            db.query(self.model)
            .filter(
                self.model.id == event_id,
                self.model.current_registrations < self.model.max_capacity,
            )
            .update(
                {self.model.current_registrations: self.model.current_registrations + 1},
                synchronize_session=False,
            )
        )
        return count == 1

    def add_seat_unchecked(self, db: Session, *, event_id: str) -> None:
        """Count a seat even past capacity (for payments already captured)."""
        db.query(self.model).filter(self.model.id == event_id).update(
            {self.model.current_registrations: self.model.current_registrations + 1},
            synchronize_session=False,
        )

    def apply_review(
        self,
        db: Session,
        *,
        event_id: str,
        target: EventStatus,
        reviewer_id: str,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """
        Move a submitted event to published or rejected. Returns False when
        the event was no longer submitted at write time.
        """
        count = (
            db.query(self.model)
            .filter(
                self.model.id == event_id,
                self.model.status == EventStatus.submitted.value,
            )
            .update(
                {
                    self.model.status: target.value,
                    self.model.reviewed_at: reviewed_at,
                    self.model.reviewed_by: reviewer_id,
                    self.model.rejection_reason: rejection_reason,
                    self.model.updated_at: reviewed_at,
                },
                synchronize_session=False,
            )
        )
        return count == 1

    def expire_overdue(self, db: Session, *, now: datetime) -> int:
        """Submitted events whose review window has closed become expired."""
        source = sweep_source(EventStatus.expired)
        return (
            db.query(self.model)
            .filter(
                self.model.status == source.value,
                self.model.expires_at < now,
            )
            .update(
                {
                    self.model.status: EventStatus.expired.value,
                    self.model.updated_at: now,
                },
                synchronize_session=False,
            )
        )

    def complete_past(self, db: Session, *, now: datetime) -> int:
        """Published events whose date has passed become completed."""
        source = sweep_source(EventStatus.completed)
        return (
            db.query(self.model)
            .filter(
                self.model.status == source.value,
                self.model.event_date < now,
            )
            .update(
                {
                    self.model.status: EventStatus.completed.value,
                    self.model.updated_at: now,
                },
                synchronize_session=False,
            )
        )


event = CRUDEvent(Event)
