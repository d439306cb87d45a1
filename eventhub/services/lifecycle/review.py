# eventhub/services/lifecycle/review.py
"""Admin approve/reject of submitted events."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.core.actor import Actor
from eventhub.core.config import settings
from eventhub.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionFailedError,
)
from eventhub.models.event import Event
from eventhub.schemas.event import EventStatus
from eventhub.utils.time import utcnow

from .status_engine import ACTION_NAMES, TransitionTrigger, ensure_transition

logger = logging.getLogger(__name__)


def _review(
    db: Session,
    actor: Actor,
    event_id: str,
    target: EventStatus,
    rejection_reason: Optional[str] = None,
) -> Event:
    event = crud.event.get(db, id=event_id)
    if event is None:
        raise NotFoundError("Event not found")

    ensure_transition(event.status, target, TransitionTrigger.admin_review)

    # The status is re-checked by the UPDATE itself; a concurrent review
    # that committed first leaves nothing to match.
    updated = crud.event.apply_review(
        db,
        event_id=event.id,
        target=target,
        reviewer_id=actor.profile_id,
        reviewed_at=utcnow(),
        rejection_reason=rejection_reason,
    )
    if not updated:
        db.rollback()
        db.refresh(event)
        logger.info(
            "Lost review race on event %s, status is now %s", event.id, event.status
        )
        raise InvalidTransitionError(ACTION_NAMES[target], event.status)

    db.commit()
    db.refresh(event)
    logger.info(
        "Event %s %s by admin %s", event.id, target.value, actor.profile_id
    )
    return event


def _require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise PermissionDeniedError()


def approve_event(db: Session, actor: Actor, event_id: str) -> Event:
    _require_admin(actor)
    return _review(db, actor, event_id, EventStatus.published)


def reject_event(db: Session, actor: Actor, event_id: str, reason: str) -> Event:
    _require_admin(actor)
    reason = (reason or "").strip()
    if len(reason) < settings.MIN_REJECTION_REASON_LENGTH:
        raise PreconditionFailedError(
            f"Rejection reason must be at least {settings.MIN_REJECTION_REASON_LENGTH} characters"
        )
    return _review(db, actor, event_id, EventStatus.rejected, rejection_reason=reason)
