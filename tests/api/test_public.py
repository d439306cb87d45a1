# tests/api/test_public.py
from datetime import timedelta

from eventhub.utils.time import utcnow
from tests.utils.event import create_random_event


def test_upcoming_lists_published_events_soonest_first(client, db):
    later = create_random_event(db, event_date=utcnow() + timedelta(days=20))
    sooner = create_random_event(db, event_date=utcnow() + timedelta(days=2))
    create_random_event(db, status="submitted")
    create_random_event(db, status="rejected")

    response = client.get("/api/v1/events")

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [sooner.id, later.id]


def test_public_views_never_include_location_secrets(client, db):
    event = create_random_event(db, location_type="hybrid")

    listed = client.get("/api/v1/events").json()[0]
    detail = client.get(f"/api/v1/events/{event.id}").json()

    for body in (listed, detail):
        assert "meeting_link" not in body
        assert "venue_address" not in body
    assert detail["city"] == "Bengaluru"


def test_past_events_include_completed(client, db):
    done = create_random_event(db, status="completed", event_date=utcnow() - timedelta(days=3))
    create_random_event(db)

    response = client.get("/api/v1/events", params={"type": "past"})

    assert [e["id"] for e in response.json()] == [done.id]


def test_filter_by_location_type(client, db):
    create_random_event(db, location_type="online")
    offline = create_random_event(db, location_type="offline")

    response = client.get("/api/v1/events", params={"location_type": "offline"})

    assert [e["id"] for e in response.json()] == [offline.id]


def test_unpublished_event_is_not_found(client, db):
    event = create_random_event(db, status="submitted")

    response = client.get(f"/api/v1/events/{event.id}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
