import hashlib
import hmac
import json

from eventhub.core.config import settings


def sign_redirect(order_id: str, payment_id: str, secret: str = None) -> str:
    message = f"{order_id}|{payment_id}".encode("utf-8")
    key = (secret or settings.RAZORPAY_KEY_SECRET).encode("utf-8")
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def verify_payload(order_id: str, payment_id: str = "pay_test0001") -> dict:
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": sign_redirect(order_id, payment_id),
    }


def webhook_body(event: str, order_id: str = None, payment_id: str = "pay_test0001") -> bytes:
    entity = {"id": payment_id, "order_id": order_id, "amount": 99900, "currency": "INR"}
    if event == "payment.failed":
        entity.update(
            {"status": "failed", "error_code": "BAD_REQUEST_ERROR", "error_description": "Card declined"}
        )
    else:
        entity["status"] = "captured"
    payload = {
        "entity": "event",
        "account_id": "acc_test",
        "event": event,
        "payload": {"payment": {"entity": entity}},
        "created_at": 1760000000,
    }
    # Non-default separators: the signature covers these exact bytes.
    return json.dumps(payload, separators=(", ", ":  ")).encode("utf-8")


def sign_webhook(body: bytes, secret: str = None) -> str:
    key = (secret or settings.RAZORPAY_WEBHOOK_SECRET).encode("utf-8")
    return hmac.new(key, body, hashlib.sha256).hexdigest()


def webhook_headers(body: bytes, signature: str = None) -> dict:
    return {
        "Content-Type": "application/json",
        "X-Razorpay-Signature": signature if signature is not None else sign_webhook(body),
    }
