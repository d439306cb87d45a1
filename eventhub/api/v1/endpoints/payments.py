# eventhub/api/v1/endpoints/payments.py
from fastapi import APIRouter, BackgroundTasks, Depends, Request

from eventhub.api import deps
from eventhub.core.limiter import limiter
from eventhub.schemas.payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from eventhub.services.payment.reconciliation import PaymentReconciliationService
from eventhub.services.registration.notifications import (
    build_confirmation_email,
    send_confirmation,
)

router = APIRouter(tags=["Payments"])


@router.post("/events/{event_id}/create-order", response_model=CreateOrderResponse)
@limiter.limit("10/minute")
def create_order(
    request: Request,
    event_id: str,
    order_in: CreateOrderRequest,
    service: PaymentReconciliationService = Depends(deps.get_payment_service),
):
    """
    Open a payment order for a paid event. The amount is taken from the
    event's stored price.
    """
    return service.create_order(event_id, order_in)


@router.post("/events/{event_id}/verify-payment", response_model=VerifyPaymentResponse)
@limiter.limit("20/minute")
def verify_payment(
    request: Request,
    event_id: str,
    payload: VerifyPaymentRequest,
    background_tasks: BackgroundTasks,
    service: PaymentReconciliationService = Depends(deps.get_payment_service),
):
    """
    Redirect-path confirmation after checkout. Calling it again, or after
    the webhook already settled the order, is a no-op.
    """
    outcome = service.verify_redirect(
        event_id, payload, client_ip=deps.get_client_ip(request)
    )
    if outcome.transitioned:
        background_tasks.add_task(
            send_confirmation,
            build_confirmation_email(outcome.registration, outcome.event),
        )
    return VerifyPaymentResponse(
        registration_id=outcome.registration.id,
        newly_settled=outcome.transitioned,
        message="Payment verified" if outcome.transitioned else "Payment already verified",
    )
