# tests/api/test_webhooks.py
from eventhub.models.event import Event
from eventhub.models.registration import Registration
from tests.utils.event import create_random_event
from tests.utils.payment import verify_payload, webhook_body, webhook_headers
from tests.utils.registration import create_registration

WEBHOOK_URL = "/api/v1/webhooks/razorpay"


def open_order(client, db):
    event = create_random_event(db, price=999)
    order = client.post(
        f"/api/v1/events/{event.id}/create-order",
        json={"attendee_name": "Ravi", "attendee_email": "ravi@example.com"},
    ).json()
    return event, order


def post_webhook(client, body, signature=None):
    return client.post(WEBHOOK_URL, content=body, headers=webhook_headers(body, signature))


def test_captured_webhook_settles_registration(client, db, email_mock):
    event, order = open_order(client, db)
    body = webhook_body("payment.captured", order_id=order["order_id"], payment_id="pay_hook")

    response = post_webhook(client, body)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    db.expire_all()
    registration = db.get(Registration, order["registration_id"])
    assert registration.payment_status == "paid"
    assert registration.razorpay_payment_id == "pay_hook"
    assert db.get(Event, event.id).current_registrations == 1
    assert email_mock.call_count == 1


def test_duplicate_delivery_is_a_no_op(client, db, email_mock):
    event, order = open_order(client, db)
    body = webhook_body("payment.captured", order_id=order["order_id"])

    assert post_webhook(client, body).status_code == 200
    assert post_webhook(client, body).status_code == 200

    db.expire_all()
    assert db.get(Event, event.id).current_registrations == 1
    assert email_mock.call_count == 1


def test_webhook_then_redirect_sends_one_email(client, db, email_mock):
    event, order = open_order(client, db)
    body = webhook_body("payment.captured", order_id=order["order_id"])

    post_webhook(client, body)
    response = client.post(
        f"/api/v1/events/{event.id}/verify-payment", json=verify_payload(order["order_id"])
    )

    assert response.status_code == 200
    assert response.json()["newly_settled"] is False
    assert email_mock.call_count == 1


def test_redirect_then_webhook_sends_one_email(client, db, email_mock):
    event, order = open_order(client, db)
    client.post(
        f"/api/v1/events/{event.id}/verify-payment", json=verify_payload(order["order_id"])
    )

    response = post_webhook(client, webhook_body("payment.captured", order_id=order["order_id"]))

    assert response.status_code == 200
    assert email_mock.call_count == 1


def test_failed_webhook_does_not_downgrade_paid(client, db, email_mock):
    event, order = open_order(client, db)
    post_webhook(client, webhook_body("payment.captured", order_id=order["order_id"]))

    response = post_webhook(client, webhook_body("payment.failed", order_id=order["order_id"]))

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Registration, order["registration_id"]).payment_status == "paid"
    assert db.get(Event, event.id).current_registrations == 1


def test_failed_webhook_marks_pending_failed(client, db, email_mock):
    event, order = open_order(client, db)

    response = post_webhook(client, webhook_body("payment.failed", order_id=order["order_id"]))

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Registration, order["registration_id"]).payment_status == "failed"
    assert email_mock.call_count == 0


def test_unknown_event_type_is_acknowledged(client):
    body = b'{"event": "order.paid", "payload": {}}'

    response = post_webhook(client, body)

    assert response.status_code == 200


def test_unknown_order_is_acknowledged(client, email_mock):
    response = post_webhook(client, webhook_body("payment.captured", order_id="order_nobody"))

    assert response.status_code == 200
    assert email_mock.call_count == 0


def test_missing_signature_is_rejected(client, db):
    event, order = open_order(client, db)
    body = webhook_body("payment.captured", order_id=order["order_id"])

    response = client.post(WEBHOOK_URL, content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    db.expire_all()
    assert db.get(Registration, order["registration_id"]).payment_status == "pending"


def test_bad_signature_is_rejected(client, db):
    event, order = open_order(client, db)
    body = webhook_body("payment.captured", order_id=order["order_id"])

    response = post_webhook(client, body, signature="deadbeef")

    assert response.status_code == 400
    db.expire_all()
    assert db.get(Registration, order["registration_id"]).payment_status == "pending"


def test_signed_but_invalid_json_is_rejected(client):
    response = post_webhook(client, b"{not json")

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid webhook payload"


def test_signed_but_malformed_payment_object_is_rejected(client):
    body = b'{"event":"payment.captured","payload":{"payment":"x"}}'

    response = post_webhook(client, body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid webhook payload"


def test_conflicting_capture_is_acknowledged_without_email(client, db, email_mock):
    event = create_random_event(db, price=999)
    for order_id in ("order_a", "order_b"):
        create_registration(
            db, event=event, email="ravi@example.com", payment_status="pending", order_id=order_id
        )
    post_webhook(client, webhook_body("payment.captured", order_id="order_a", payment_id="pay_a"))

    response = post_webhook(
        client, webhook_body("payment.captured", order_id="order_b", payment_id="pay_b")
    )

    assert response.status_code == 200
    assert email_mock.call_count == 1
    db.expire_all()
    assert db.get(Event, event.id).current_registrations == 1
    pending = db.query(Registration).filter(Registration.razorpay_order_id == "order_b").one()
    assert pending.payment_status == "pending"
