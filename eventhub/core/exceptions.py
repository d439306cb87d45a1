# eventhub/core/exceptions.py
"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to so the API layer can translate
it in one place (see ``eventhub.main``). Services never raise HTTPException
directly, which keeps them callable from the scheduler and from tests.
"""
from fastapi import status


class EventHubError(Exception):
    """Base exception for all domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(EventHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class AuthenticationError(EventHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class PermissionDeniedError(EventHubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden - Admin access required"


class PreconditionFailedError(EventHubError):
    """Wrong state for the requested operation (not published, past, etc.)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Precondition failed"


class CapacityExceededError(PreconditionFailedError):
    default_detail = "Event is full"


class QuotaExceededError(EventHubError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Daily submission limit reached"


class ConflictError(EventHubError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class AlreadyRegisteredError(ConflictError):
    default_detail = "This email is already registered for this event"


class InvalidTransitionError(ConflictError):
    """Raised when an event status transition is not allowed."""

    def __init__(self, action: str, current_status: str):
        self.action = action
        self.current_status = current_status
        super().__init__(f"Cannot {action} event with status: {current_status}")


class SignatureVerificationError(EventHubError):
    # Detail must not say which part of the signature mismatched.
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid payment signature"


class PaymentGatewayError(EventHubError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment gateway unavailable"

    def __init__(self, detail: str | None = None, retryable: bool = False):
        self.retryable = retryable
        super().__init__(detail)
