# eventhub/schemas/registration.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from eventhub.schemas.event import EventAttendeeView


class PaymentStatus(str, Enum):
    free = "free"
    pending = "pending"
    paid = "paid"
    failed = "failed"


class RegistrationCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    attendee_name: str = Field(
        ..., min_length=2, max_length=100, json_schema_extra={"example": "Alice"}
    )
    attendee_email: EmailStr = Field(..., json_schema_extra={"example": "alice@x.com"})
    whatsapp_number: Optional[str] = Field(
        None, min_length=10, max_length=15, pattern=r"^\+?[0-9\s-]{10,15}$"
    )

    @field_validator("attendee_email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class Registration(BaseModel):
    id: str
    event_id: str
    attendee_name: str
    attendee_email: str
    whatsapp_number: Optional[str] = None
    registered_at: datetime
    payment_status: PaymentStatus
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    amount_paid: Optional[int] = None

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    success: bool = True
    registration: Registration
    event: EventAttendeeView


class RegistrationConfirmation(BaseModel):
    """A registration as shown on its confirmation page.

    Location details on ``event`` stay blank until the registration is settled.
    """

    registration: Registration
    event: EventAttendeeView
