# tests/services/test_review.py
import pytest

from eventhub.core.actor import Actor
from eventhub.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionFailedError,
)
from eventhub.services.lifecycle import review
from tests.utils.event import create_random_event
from tests.utils.profile import create_profile


@pytest.fixture
def admin(db):
    profile = create_profile(db, is_admin=True)
    return Actor(profile_id=profile.id, email=profile.email, is_admin=True)


def test_approve_sets_review_fields(db, admin):
    event = create_random_event(db, status="submitted")
    event.rejection_reason = "left over"
    db.commit()

    approved = review.approve_event(db, admin, event.id)

    assert approved.status == "published"
    assert approved.reviewed_by == admin.profile_id
    assert approved.reviewed_at is not None
    assert approved.rejection_reason is None


def test_reject_stores_trimmed_reason(db, admin):
    event = create_random_event(db, status="submitted")

    rejected = review.reject_event(db, admin, event.id, "   Agenda is missing entirely   ")

    assert rejected.status == "rejected"
    assert rejected.rejection_reason == "Agenda is missing entirely"


def test_reject_requires_reason_of_ten_characters(db, admin):
    event = create_random_event(db, status="submitted")

    with pytest.raises(PreconditionFailedError):
        review.reject_event(db, admin, event.id, "   too short ")
    with pytest.raises(PreconditionFailedError):
        review.reject_event(db, admin, event.id, "")

    db.refresh(event)
    assert event.status == "submitted"


def test_non_admin_is_forbidden(db):
    host = create_profile(db)
    event = create_random_event(db, host=host, status="submitted")

    with pytest.raises(PermissionDeniedError):
        review.approve_event(db, Actor(profile_id=host.id, email=host.email), event.id)


def test_missing_event(db, admin):
    with pytest.raises(NotFoundError):
        review.approve_event(db, admin, "evt_missing")


@pytest.mark.parametrize("status", ["published", "rejected", "expired", "completed"])
def test_review_outside_submitted_is_a_conflict(db, admin, status):
    event = create_random_event(db, status=status)

    with pytest.raises(InvalidTransitionError) as exc_info:
        review.approve_event(db, admin, event.id)

    assert exc_info.value.detail == f"Cannot approve event with status: {status}"


def test_losing_a_review_race_reports_the_winning_status(db, session_factory, admin):
    """
    The loser read the event as submitted, but another admin published it
    before the loser's write.
    """
    event = create_random_event(db, status="submitted")
    stale_session = session_factory()
    try:
        # Load the event as "submitted" into the loser's session.
        stale_event = stale_session.get(type(event), event.id)
        assert stale_event.status == "submitted"

        review.approve_event(db, admin, event.id)

        with pytest.raises(InvalidTransitionError) as exc_info:
            review.reject_event(stale_session, admin, event.id, "Duplicate of another event")

        assert exc_info.value.detail == "Cannot reject event with status: published"
    finally:
        stale_session.close()

    db.refresh(event)
    assert event.status == "published"
