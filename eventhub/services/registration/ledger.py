# eventhub/services/registration/ledger.py
"""
Registration ledger.

At most one settled (``free`` or ``paid``) row exists per (event, email); the
partial unique index on ``registrations`` is what enforces it. Pending and
failed rows are payment attempts and may be replaced.
"""
import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.core.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    NotFoundError,
    PreconditionFailedError,
)
from eventhub.models.event import Event
from eventhub.models.registration import Registration
from eventhub.schemas.registration import PaymentStatus, RegistrationCreate
from eventhub.services import guard

logger = logging.getLogger(__name__)


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = crud.event.get(db, id=event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


def _is_registered(db: Session, event_id: str, email: str) -> bool:
    return crud.registration.get_settled(db, event_id=event_id, email=email) is not None


def register_free(
    db: Session, event_id: str, registration_in: RegistrationCreate
) -> Tuple[Registration, Event]:
    """
    Register an attendee for a free event.

    The seat claim and the insert share one transaction: if the insert hits
    the settled-registration index, the rollback also returns the seat.
    """
    event = get_event_or_404(db, event_id)
    guard.ensure_open_for_registration(event)
    if event.price > 0:
        raise PreconditionFailedError("This is a paid event. Please complete payment to register")
    email = registration_in.attendee_email
    if _is_registered(db, event.id, email):
        raise AlreadyRegisteredError()

    try:
        guard.claim_seat(db, event)
    except CapacityExceededError:
        # A concurrent request for the same email may have taken the last seat.
        if _is_registered(db, event.id, email):
            raise AlreadyRegisteredError()
        raise

    registration = crud.registration.add_for_event(
        db,
        obj_in=registration_in,
        event_id=event.id,
        payment_status=PaymentStatus.free,
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Duplicate registration for event %s by %s", event.id, email)
        raise AlreadyRegisteredError()

    db.refresh(registration)
    db.refresh(event)
    logger.info("Free registration %s created for event %s", registration.id, event.id)
    return registration, event


def get_confirmation(
    db: Session, event_id: str, registration_id: str
) -> Tuple[Registration, Event]:
    """Look up a registration by its id, which acts as the access token."""
    registration = crud.registration.get_for_event(
        db, event_id=event_id, registration_id=registration_id
    )
    if registration is None:
        raise NotFoundError("Registration not found")
    event = get_event_or_404(db, event_id)
    return registration, event


def is_settled(registration: Registration) -> bool:
    return registration.payment_status in (PaymentStatus.free.value, PaymentStatus.paid.value)
