from typing import Optional
from pydantic import BaseModel
from brewhub.services.checkout import PaymentMethod


class CheckoutRequest(BaseModel):
    # blank values are reported by the checkout validator, not here
    delivery_address: str = ""
    phone: str = ""
    notes: Optional[str] = ""
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY


class StatusUpdateRequest(BaseModel):
    status: str


class PaymentStatusUpdateRequest(BaseModel):
    payment_status: str
