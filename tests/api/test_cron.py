# tests/api/test_cron.py
from datetime import timedelta
from unittest.mock import patch

from eventhub import crud
from eventhub.models.cron_log import CronLog
from eventhub.utils.time import utcnow
from tests.utils.auth import get_cron_headers
from tests.utils.event import create_random_event


def test_requires_cron_secret(client, db):
    for headers in ({}, get_cron_headers("wrong-secret"), {"Authorization": "test-cron-secret"}):
        response = client.post("/api/v1/cron/expire-events", headers=headers)
        assert response.status_code == 401
    assert db.query(CronLog).count() == 0


def test_expire_events(client, db):
    now = utcnow()
    stale = create_random_event(
        db, status="submitted", created_at=now - timedelta(days=8), expires_at=now - timedelta(hours=1)
    )
    fresh = create_random_event(db, status="submitted")

    response = client.post("/api/v1/cron/expire-events", headers=get_cron_headers())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["job"] == "expire"
    assert data["events_affected"] == 1
    assert data["message"] == "Expired 1 events"
    db.refresh(stale)
    db.refresh(fresh)
    assert stale.status == "expired"
    assert fresh.status == "submitted"


def test_complete_events_accepts_get(client, db):
    past = create_random_event(db, event_date=utcnow() - timedelta(hours=2))

    response = client.get("/api/v1/cron/complete-events", headers=get_cron_headers())

    assert response.status_code == 200
    assert response.json()["events_affected"] == 1
    db.refresh(past)
    assert past.status == "completed"


def test_sweeps_are_idempotent_and_logged(client, db):
    create_random_event(db, event_date=utcnow() - timedelta(hours=2))

    first = client.post("/api/v1/cron/complete-events", headers=get_cron_headers())
    second = client.post("/api/v1/cron/complete-events", headers=get_cron_headers())

    assert first.json()["events_affected"] == 1
    assert second.json()["events_affected"] == 0
    logs = db.query(CronLog).all()
    assert len(logs) == 2
    assert {log.triggered_by for log in logs} == {"http_cron"}


def test_failed_sweep_returns_500(client, db):
    with patch.object(crud.event, "complete_past", side_effect=RuntimeError("boom")):
        response = client.post("/api/v1/cron/complete-events", headers=get_cron_headers())

    assert response.status_code == 500
    assert response.json()["success"] is False
    log = db.query(CronLog).one()
    assert log.status == "error"
