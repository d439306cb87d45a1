# tests/conftest.py
import os

# Settings are read at import time, so the environment is prepared first.
os.environ.setdefault("ENV", "local")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp_test_secret")
os.environ.setdefault("RAZORPAY_WEBHOOK_SECRET", "rzp_test_webhook_secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import itertools
import json
from unittest.mock import patch

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from eventhub.core.config import settings
from eventhub.db.session import get_db
from eventhub.main import app
from eventhub.models import Base
from eventhub.services.payment.provider_factory import get_payment_provider
from eventhub.services.payment.providers.razorpay_provider import (
    RazorpayConfig,
    RazorpayProvider,
)


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Session for arranging data and asserting on it."""
    session = session_factory()
    yield session
    session.close()


# --- Payment gateway mock ---
class FakeRazorpayGateway:
    """Answers POST /orders like the real API and remembers what it was sent."""

    def __init__(self):
        self.orders = []
        self.fail_with_status = None
        self._ids = itertools.count(1)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with_status:
            return httpx.Response(self.fail_with_status, json={"error": {"code": "SERVER_ERROR"}})
        body = json.loads(request.content)
        order = {
            "id": f"order_test{next(self._ids):04d}",
            "entity": "order",
            "amount": body["amount"],
            "currency": body["currency"],
            "receipt": body["receipt"],
            "status": "created",
        }
        self.orders.append({"request": request, "body": body, "order": order})
        return httpx.Response(200, json=order)


@pytest.fixture(scope="function")
def gateway():
    return FakeRazorpayGateway()


@pytest.fixture(scope="function")
def payment_provider(gateway):
    return RazorpayProvider(
        RazorpayConfig(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            webhook_secret=settings.RAZORPAY_WEBHOOK_SECRET,
            base_url="https://api.razorpay.test/v1",
        ),
        transport=httpx.MockTransport(gateway),
    )


@pytest.fixture(scope="function")
def email_mock():
    with patch(
        "eventhub.services.registration.notifications.send_registration_confirmation"
    ) as mock:
        mock.return_value = {"success": True, "id": "email_test"}
        yield mock


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(session_factory, payment_provider, email_mock):
    """
    TestClient bound to the per-test SQLite database, with the payment
    gateway and email sending mocked.
    """

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_provider] = lambda: payment_provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
