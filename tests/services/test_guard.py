# tests/services/test_guard.py
from datetime import timedelta

import pytest

from eventhub.core.actor import Actor
from eventhub.core.exceptions import (
    CapacityExceededError,
    ConflictError,
    PreconditionFailedError,
    QuotaExceededError,
)
from eventhub.schemas.event import EventCreate
from eventhub.services import guard
from eventhub.utils.time import utcnow
from tests.utils.event import create_random_event, event_payload
from tests.utils.profile import create_profile


def actor_for(profile) -> Actor:
    return Actor(profile_id=profile.id, email=profile.email, is_admin=profile.is_admin)


def test_submit_event_sets_review_window_and_counter(db):
    host = create_profile(db)

    event = guard.submit_event(db, actor_for(host), EventCreate(**event_payload()))

    assert event.status == "submitted"
    assert event.current_registrations == 0
    assert event.expires_at - event.submitted_at == timedelta(days=7)
    db.refresh(host)
    assert host.submissions_today == 1
    assert host.submissions_date == utcnow().date()


def test_non_admin_price_is_forced_to_zero(db):
    host = create_profile(db)

    event = guard.submit_event(db, actor_for(host), EventCreate(**event_payload(price=999)))

    assert event.price == 0


def test_admin_may_set_price(db):
    admin = create_profile(db, is_admin=True)

    event = guard.submit_event(db, actor_for(admin), EventCreate(**event_payload(price=999)))

    assert event.price == 999


def test_default_image_is_applied(db):
    host = create_profile(db)

    event = guard.submit_event(db, actor_for(host), EventCreate(**event_payload()))

    assert event.image_url == "/images/default-event-image.png"


def test_fourth_submission_of_the_day_is_refused(db):
    host = create_profile(db)
    actor = actor_for(host)
    for _ in range(3):
        guard.submit_event(db, actor, EventCreate(**event_payload()))

    with pytest.raises(QuotaExceededError) as exc_info:
        guard.submit_event(db, actor, EventCreate(**event_payload()))

    assert exc_info.value.status_code == 429
    assert exc_info.value.detail == "Daily submission limit reached (3/day)"


def test_rejected_submission_frees_its_slot(db):
    host = create_profile(db)
    create_random_event(db, host=host, status="submitted")
    create_random_event(db, host=host, status="published")
    create_random_event(db, host=host, status="rejected")

    quota = guard.get_submission_quota(db, actor_for(host))
    assert quota.current_count == 2
    assert quota.can_submit

    guard.submit_event(db, actor_for(host), EventCreate(**event_payload()))
    assert not guard.get_submission_quota(db, actor_for(host)).can_submit


def test_yesterdays_submissions_do_not_count(db):
    host = create_profile(db)
    yesterday = utcnow() - timedelta(days=1)
    for _ in range(3):
        create_random_event(db, host=host, status="submitted", created_at=yesterday)

    assert guard.get_submission_quota(db, actor_for(host)).current_count == 0


def test_admins_are_exempt_from_quota(db):
    admin = create_profile(db, is_admin=True)
    actor = actor_for(admin)
    for _ in range(4):
        guard.submit_event(db, actor, EventCreate(**event_payload()))

    quota = guard.get_submission_quota(db, actor)
    assert quota.current_count == 4
    assert quota.can_submit


def test_duplicate_title_is_a_conflict(db):
    host = create_profile(db)
    other_host = create_profile(db)
    guard.submit_event(db, actor_for(host), EventCreate(**event_payload(title="Intro to LLMs")))

    with pytest.raises(ConflictError):
        guard.submit_event(
            db, actor_for(other_host), EventCreate(**event_payload(title="Intro to LLMs"))
        )


def test_ensure_open_for_registration(db):
    published = create_random_event(db, status="published")
    submitted = create_random_event(db, status="submitted")
    past = create_random_event(db, status="published", event_date=utcnow() - timedelta(hours=2))

    guard.ensure_open_for_registration(published)
    with pytest.raises(PreconditionFailedError, match="not available"):
        guard.ensure_open_for_registration(submitted)
    with pytest.raises(PreconditionFailedError, match="past events"):
        guard.ensure_open_for_registration(past)


def test_claim_seat_raises_when_full(db):
    event = create_random_event(db, max_capacity=5, current_registrations=5)

    with pytest.raises(CapacityExceededError):
        guard.claim_seat(db, event)
