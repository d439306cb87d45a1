# eventhub/services/payment/providers/razorpay_provider.py
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..provider_interface import (
    CreateOrderParams,
    OrderResult,
    PaymentError,
    PaymentProviderInterface,
    WebhookEvent,
    WebhookEventType,
)

logger = logging.getLogger(__name__)


@dataclass
class RazorpayConfig:
    """Configuration for Razorpay provider."""
    key_id: str
    key_secret: str
    webhook_secret: str
    base_url: str = "https://api.razorpay.com/v1"
    timeout: float = 15.0


RAZORPAY_EVENT_MAP: Dict[str, WebhookEventType] = {
    "payment.captured": WebhookEventType.PAYMENT_CAPTURED,
    "payment.failed": WebhookEventType.PAYMENT_FAILED,
}


def hmac_sha256_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class RazorpayProvider(PaymentProviderInterface):
    """
    Razorpay implementation of PaymentProviderInterface.

    Two independent signatures:
    - checkout redirect: HMAC-SHA256("<order_id>|<payment_id>", key_secret)
    - webhook: HMAC-SHA256(raw body, webhook_secret)

    Never log expected signatures.
    """

    def __init__(
        self, config: RazorpayConfig, transport: Optional[httpx.BaseTransport] = None
    ):
        self._config = config
        # Injected in tests (httpx.MockTransport).
        self._transport = transport

    @property
    def code(self) -> str:
        return "razorpay"

    def get_publishable_key(self) -> str:
        return self._config.key_id

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._config.base_url,
            auth=(self._config.key_id, self._config.key_secret),
            timeout=self._config.timeout,
            transport=self._transport,
        )

    def create_order(self, params: CreateOrderParams) -> OrderResult:
        body = {
            "amount": params.amount,
            "currency": params.currency,
            "receipt": params.receipt,
            "notes": params.notes,
        }
        try:
            with self._client() as client:
                response = client.post("/orders", json=body)
        except httpx.TimeoutException:
            logger.warning("Razorpay order creation timed out")
            raise PaymentError(
                code="TIMEOUT", message="Payment gateway timed out", retryable=True
            )
        except httpx.RequestError as e:
            logger.warning(f"Razorpay order request error: {e}")
            raise PaymentError(
                code="NETWORK_ERROR",
                message="Could not reach payment gateway",
                retryable=True,
            )

        if response.status_code >= 500:
            logger.error(f"Razorpay returned {response.status_code}")
            raise PaymentError(
                code="PROVIDER_ERROR",
                message="Payment gateway unavailable",
                retryable=True,
            )
        if response.status_code != 200:
            logger.error(
                f"Razorpay rejected order creation ({response.status_code}): {response.text}"
            )
            raise PaymentError(
                code="ORDER_REJECTED",
                message="Payment gateway rejected the order",
                retryable=False,
            )

        data = response.json()
        return OrderResult(
            order_id=data["id"],
            amount=data.get("amount", params.amount),
            currency=data.get("currency", params.currency),
            status=data.get("status", "created"),
            provider_metadata=data,
        )

    def verify_payment_signature(
        self, order_id: str, payment_id: str, signature: str
    ) -> bool:
        expected = hmac_sha256_hex(
            self._config.key_secret, f"{order_id}|{payment_id}".encode("utf-8")
        )
        return hmac.compare_digest(expected, signature or "")

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        expected = hmac_sha256_hex(self._config.webhook_secret, payload)
        return hmac.compare_digest(expected, signature or "")

    def parse_webhook_event(self, payload: bytes) -> WebhookEvent:
        try:
            event: Dict[str, Any] = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Error parsing webhook event: {e}")
            raise PaymentError(
                code="PARSE_ERROR",
                message="Could not parse webhook event",
                retryable=False,
            )
        if not isinstance(event, dict):
            raise PaymentError(
                code="PARSE_ERROR",
                message="Could not parse webhook event",
                retryable=False,
            )

        raw_type = str(event.get("event", ""))
        payment: Any = event
        for key in ("payload", "payment", "entity"):
            payment = payment.get(key) or {}
            if not isinstance(payment, dict):
                logger.error(f"Webhook {raw_type} has a malformed {key} object")
                raise PaymentError(
                    code="PARSE_ERROR",
                    message="Could not parse webhook event",
                    retryable=False,
                )

        data: Dict[str, Any] = {
            "amount": payment.get("amount"),
            "currency": payment.get("currency"),
            "status": payment.get("status"),
        }
        if payment.get("error_code"):
            data["failureCode"] = payment.get("error_code")
            data["failureMessage"] = payment.get("error_description")

        return WebhookEvent(
            event_type=RAZORPAY_EVENT_MAP.get(raw_type, WebhookEventType.UNKNOWN),
            raw_event_type=raw_type,
            order_id=payment.get("order_id"),
            payment_id=payment.get("id"),
            data=data,
            raw_payload=event,
        )
