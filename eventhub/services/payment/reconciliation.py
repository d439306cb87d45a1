# eventhub/services/payment/reconciliation.py
"""
Payment reconciliation for paid events.

A pending registration can be settled by two independent signals, in any
order and any number of times:

1. the client's redirect after checkout (``verify_redirect``), signed with the
   API key secret over ``order_id|payment_id``
2. the gateway's webhook (``handle_webhook``), signed with the webhook secret
   over the raw body

Both end in ``settle``, a single conditional UPDATE. Only the call whose UPDATE
matched reports ``transitioned=True``, and only that caller sends the
confirmation email.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.core.config import settings
from eventhub.core.exceptions import (
    AlreadyRegisteredError,
    ConflictError,
    NotFoundError,
    PaymentGatewayError,
    PreconditionFailedError,
    SignatureVerificationError,
)
from eventhub.models.event import Event
from eventhub.models.registration import Registration
from eventhub.schemas.payment import CreateOrderRequest, CreateOrderResponse, VerifyPaymentRequest
from eventhub.schemas.registration import PaymentStatus
from eventhub.services import guard
from eventhub.services.registration.ledger import get_event_or_404

from .provider_interface import (
    CreateOrderParams,
    PaymentError,
    PaymentProviderInterface,
    WebhookEventType,
)

logger = logging.getLogger(__name__)


@dataclass
class SettlementOutcome:
    registration: Registration
    event: Event
    # True only for the caller that moved the row to paid.
    transitioned: bool


@dataclass
class WebhookOutcome:
    event_type: str
    settlement: Optional[SettlementOutcome] = None


class PaymentReconciliationService:
    """Handles order creation and settlement of paid registrations."""

    def __init__(self, db: Session, provider: PaymentProviderInterface):
        self.db = db
        self.provider = provider

    # ------------------------------------------------------------------
    # Order creation
    # ------------------------------------------------------------------

    def create_order(
        self, event_id: str, order_in: CreateOrderRequest
    ) -> CreateOrderResponse:
        """
        Open a gateway order and record a pending registration for it.

        Earlier pending/failed attempts by the same email are deleted in the
        same transaction as the insert, so their orders can never settle.
        """
        event = get_event_or_404(self.db, event_id)
        guard.ensure_open_for_registration(event)
        if event.price <= 0:
            raise PreconditionFailedError("This event is free. Register without payment")
        guard.ensure_seat_available(event)

        email = order_in.attendee_email
        if crud.registration.get_settled(self.db, event_id=event.id, email=email):
            raise AlreadyRegisteredError()

        # Amount always comes from the stored price, in paise.
        amount = event.price * 100
        params = CreateOrderParams(
            amount=amount,
            currency=settings.PAYMENT_CURRENCY,
            receipt=f"rcpt_{uuid.uuid4().hex[:20]}",
            notes={"event_id": event.id, "attendee_email": email},
        )
        try:
            order = self.provider.create_order(params)
        except PaymentError as e:
            logger.error(
                "Order creation failed for event %s: %s (%s)", event.id, e.message, e.code
            )
            raise PaymentGatewayError(e.message, retryable=e.retryable)

        # Serializes attempts for this event so only one pending order per
        # email survives the delete-and-insert below.
        crud.event.get_for_update(self.db, event_id=event.id)
        removed = crud.registration.remove_unsettled(
            self.db, event_id=event.id, email=email
        )
        registration = crud.registration.add_for_event(
            self.db,
            obj_in=order_in,
            event_id=event.id,
            payment_status=PaymentStatus.pending,
            order_id=order.order_id,
            amount=amount,
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Could not record the order, please try again")

        self.db.refresh(registration)
        if removed:
            logger.info(
                "Replaced %s unsettled registration(s) for event %s", removed, event.id
            )
        logger.info(
            "Created order %s for registration %s", order.order_id, registration.id
        )

        return CreateOrderResponse(
            order_id=order.order_id,
            amount=amount,
            currency=settings.PAYMENT_CURRENCY,
            event_title=event.title,
            registration_id=registration.id,
            key_id=self.provider.get_publishable_key(),
        )

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def settle(
        self, order_id: str, payment_id: str, event_id: Optional[str] = None
    ) -> SettlementOutcome:
        """
        Mark the registration for ``order_id`` paid.

        Safe to call concurrently and repeatedly. The seat is counted in the
        same transaction as the status change.
        """
        try:
            transitioned = crud.registration.mark_paid(
                self.db, order_id=order_id, payment_id=payment_id, event_id=event_id
            )
            if transitioned:
                registration = crud.registration.get_by_order_id(
                    self.db, order_id=order_id
                )
                if not crud.event.claim_seat(self.db, event_id=registration.event_id):
                    # The payment is already captured; count it and flag it.
                    logger.error(
                        "Event %s is over capacity after captured payment %s (order %s)",
                        registration.event_id,
                        payment_id,
                        order_id,
                    )
                    crud.event.add_seat_unchecked(
                        self.db, event_id=registration.event_id
                    )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.error(
                "Order %s conflicts with an existing settled registration", order_id
            )
            raise AlreadyRegisteredError()

        registration = crud.registration.get_by_order_id(self.db, order_id=order_id)
        if registration is None or (
            event_id is not None and registration.event_id != event_id
        ):
            raise NotFoundError("Registration not found")

        event = crud.event.get(self.db, id=registration.event_id)
        if transitioned:
            logger.info(
                "Registration %s paid (order %s, payment %s)",
                registration.id,
                order_id,
                payment_id,
            )
        else:
            logger.info("Order %s was already settled, nothing to do", order_id)
        return SettlementOutcome(
            registration=registration, event=event, transitioned=transitioned
        )

    def verify_redirect(
        self,
        event_id: str,
        payload: VerifyPaymentRequest,
        client_ip: Optional[str] = None,
    ) -> SettlementOutcome:
        if not self.provider.verify_payment_signature(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
        ):
            logger.warning(
                "Payment signature mismatch for order %s (event %s, ip %s)",
                payload.razorpay_order_id,
                event_id,
                client_ip,
            )
            raise SignatureVerificationError()

        return self.settle(
            payload.razorpay_order_id, payload.razorpay_payment_id, event_id=event_id
        )

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def handle_webhook(
        self,
        payload: bytes,
        signature: Optional[str],
        client_ip: Optional[str] = None,
    ) -> WebhookOutcome:
        """
        Process a webhook delivery. ``payload`` must be the raw request body.

        Deliveries for unknown event types, unknown orders or orders that
        conflict with an existing registration are acknowledged without
        changes so the gateway stops retrying.
        """
        if not signature:
            logger.warning("Webhook received without signature (ip %s)", client_ip)
            raise SignatureVerificationError("Missing webhook signature")
        if not self.provider.verify_webhook_signature(payload, signature):
            logger.warning("Webhook signature verification failed (ip %s)", client_ip)
            raise SignatureVerificationError("Invalid webhook signature")

        try:
            event = self.provider.parse_webhook_event(payload)
        except PaymentError:
            raise PreconditionFailedError("Invalid webhook payload")

        if event.event_type == WebhookEventType.PAYMENT_CAPTURED:
            if not event.order_id or not event.payment_id:
                raise PreconditionFailedError("Webhook payload is missing order or payment id")
            try:
                settlement = self.settle(event.order_id, event.payment_id)
            except NotFoundError:
                logger.warning(
                    "Captured payment %s for unknown order %s",
                    event.payment_id,
                    event.order_id,
                )
                return WebhookOutcome(event_type=event.raw_event_type)
            except AlreadyRegisteredError:
                return WebhookOutcome(event_type=event.raw_event_type)
            return WebhookOutcome(event_type=event.raw_event_type, settlement=settlement)

        if event.event_type == WebhookEventType.PAYMENT_FAILED:
            if event.order_id:
                changed = crud.registration.mark_failed(self.db, order_id=event.order_id)
                self.db.commit()
                logger.info(
                    "Payment failed for order %s (%s), registration updated: %s",
                    event.order_id,
                    event.data.get("failureMessage"),
                    changed,
                )
            return WebhookOutcome(event_type=event.raw_event_type)

        logger.info("Ignoring webhook event type %s", event.raw_event_type or "<none>")
        return WebhookOutcome(event_type=event.raw_event_type)
