# eventhub/services/guard.py
"""
Capacity & submission guard.

Both ceilings are checked against database state at write time:

* a non-admin host may have at most ``DAILY_SUBMISSION_LIMIT`` active
  submissions per UTC day; the host's profile row is locked while counting
* an event's ``current_registrations`` never passes ``max_capacity``; seats are
  taken with a single conditional UPDATE
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.core.actor import Actor
from eventhub.core.config import settings
from eventhub.core.exceptions import (
    AuthenticationError,
    CapacityExceededError,
    ConflictError,
    PreconditionFailedError,
    QuotaExceededError,
)
from eventhub.models.event import Event
from eventhub.schemas.event import EventCreate, EventStatus
from eventhub.utils.time import utcnow

logger = logging.getLogger(__name__)

DUPLICATE_TITLE_DETAIL = "An event with this title already exists"


@dataclass
class SubmissionQuota:
    current_count: int
    max_limit: int
    is_exempt: bool = False
    submitted_today: int = 0

    @property
    def can_submit(self) -> bool:
        return self.is_exempt or self.current_count < self.max_limit


def get_submission_quota(db: Session, actor: Actor, now: datetime = None) -> SubmissionQuota:
    now = now or utcnow()
    current = crud.event.count_active_submissions(
        db, host_id=actor.profile_id, day=now.date()
    )
    profile = crud.profile.get(db, id=actor.profile_id)
    return SubmissionQuota(
        current_count=current,
        max_limit=settings.DAILY_SUBMISSION_LIMIT,
        is_exempt=actor.is_admin,
        submitted_today=crud.profile.submissions_on(profile, now.date()) if profile else 0,
    )


def submit_event(db: Session, actor: Actor, event_in: EventCreate) -> Event:
    """
    Create a new event in ``submitted`` status on behalf of ``actor``.

    Quota check, title check, insert and the profile's daily counter all
    happen in one transaction.
    """
    now = utcnow()

    host = crud.profile.get_for_update(db, profile_id=actor.profile_id)
    if host is None:
        raise AuthenticationError("Profile not found")

    if not actor.is_admin:
        quota = get_submission_quota(db, actor, now=now)
        if not quota.can_submit:
            db.rollback()
            logger.info(
                "Submission quota reached for host %s (%s/%s)",
                actor.profile_id,
                quota.current_count,
                quota.max_limit,
            )
            raise QuotaExceededError(
                f"Daily submission limit reached ({quota.max_limit}/day)"
            )

    if crud.event.get_by_title(db, title=event_in.title):
        db.rollback()
        raise ConflictError(DUPLICATE_TITLE_DETAIL)

    # Only admins may charge for an event.
    price = event_in.price if actor.is_admin else 0

    event = crud.event.create_with_host(
        db,
        obj_in=event_in,
        host_id=actor.profile_id,
        price=price,
        image_url=event_in.image_url or settings.DEFAULT_EVENT_IMAGE_URL,
        submitted_at=now,
        expires_at=now + timedelta(days=settings.REVIEW_WINDOW_DAYS),
    )
    crud.profile.record_submission(db, profile=host, day=now.date())

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_TITLE_DETAIL)

    db.refresh(event)
    logger.info("Event %s submitted by host %s", event.id, actor.profile_id)
    return event


def ensure_open_for_registration(event: Event, now: datetime = None) -> None:
    now = now or utcnow()
    if event.status != EventStatus.published.value:
        raise PreconditionFailedError("Event is not available for registration")
    if event.event_date <= now:
        raise PreconditionFailedError("Cannot register for past events")


def ensure_seat_available(event: Event) -> None:
    """Advisory read used before talking to the payment gateway."""
    if event.current_registrations >= event.max_capacity:
        raise CapacityExceededError()


def claim_seat(db: Session, event: Event) -> None:
    """Take a seat inside the caller's transaction or raise CapacityExceededError."""
    if not crud.event.claim_seat(db, event_id=event.id):
        db.rollback()
        raise CapacityExceededError()
