# eventhub/api/v1/endpoints/webhooks.py
"""
Webhook endpoint for the payment gateway.

The signature is checked over the raw body before anything is parsed.
Unknown event types are acknowledged with 200 so the gateway stops retrying.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request

from eventhub.api import deps
from eventhub.schemas.payment import WebhookAck
from eventhub.services.payment.reconciliation import PaymentReconciliationService
from eventhub.services.registration.notifications import (
    build_confirmation_email,
    send_confirmation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.post("/razorpay", response_model=WebhookAck)
def razorpay_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    body: bytes = Depends(deps.get_raw_body),
    razorpay_signature: Optional[str] = Header(None, alias="X-Razorpay-Signature"),
    service: PaymentReconciliationService = Depends(deps.get_payment_service),
):
    outcome = service.handle_webhook(
        body, razorpay_signature, client_ip=deps.get_client_ip(request)
    )
    settlement = outcome.settlement
    if settlement is not None and settlement.transitioned:
        background_tasks.add_task(
            send_confirmation,
            build_confirmation_email(settlement.registration, settlement.event),
        )
    return WebhookAck()
