# eventhub/schemas/payment.py
from pydantic import BaseModel, Field

from eventhub.schemas.registration import RegistrationCreate


class CreateOrderRequest(RegistrationCreate):
    pass


class CreateOrderResponse(BaseModel):
    order_id: str
    amount: int  # paise
    currency: str
    event_title: str
    registration_id: str
    key_id: str


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)


class VerifyPaymentResponse(BaseModel):
    success: bool = True
    registration_id: str
    # False when another request (redirect or webhook) settled it first.
    newly_settled: bool
    message: str


class WebhookAck(BaseModel):
    received: bool = True
