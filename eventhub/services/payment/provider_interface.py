# eventhub/services/payment/provider_interface.py
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class WebhookEventType(str, Enum):
    """Webhook events the reconciliation protocol acts on."""
    PAYMENT_CAPTURED = "payment.captured"
    PAYMENT_FAILED = "payment.failed"
    UNKNOWN = "unknown"


@dataclass
class CreateOrderParams:
    """Parameters for creating a gateway order."""
    amount: int  # In smallest currency unit (paise)
    currency: str  # ISO 4217
    receipt: str
    notes: Dict[str, str] = field(default_factory=dict)


@dataclass
class OrderResult:
    """Result of creating an order."""
    order_id: str
    amount: int
    currency: str
    status: str
    provider_metadata: Optional[Dict[str, Any]] = None


@dataclass
class WebhookEvent:
    """Standardized webhook event."""
    event_type: WebhookEventType
    raw_event_type: str
    order_id: Optional[str]
    payment_id: Optional[str]
    data: Dict[str, Any]
    raw_payload: Any


class PaymentError(Exception):
    """Raised by providers when the gateway cannot complete a call."""

    def __init__(self, code: str, message: str, retryable: bool = False):
        self.code = code
        self.message = message
        self.retryable = retryable
        super().__init__(message)


class PaymentProviderInterface(ABC):
    """
    Interface the payment reconciliation service talks to.
    Signature checks are pure functions of the configured secrets.
    """

    @property
    @abstractmethod
    def code(self) -> str:
        """Provider code identifier (e.g., 'razorpay')."""
        pass

    @abstractmethod
    def create_order(self, params: CreateOrderParams) -> OrderResult:
        """Create an order the client-side checkout widget can pay."""
        pass

    @abstractmethod
    def verify_payment_signature(
        self, order_id: str, payment_id: str, signature: str
    ) -> bool:
        """Verify the signature handed to the client after checkout."""
        pass

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        """Verify a webhook signature over the raw request body."""
        pass

    @abstractmethod
    def parse_webhook_event(self, payload: bytes) -> WebhookEvent:
        """Parse webhook event into standardized format."""
        pass

    @abstractmethod
    def get_publishable_key(self) -> str:
        """Key id the checkout widget is opened with."""
        pass
