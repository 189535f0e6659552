from typing import Optional
from pydantic import BaseModel, Field, model_validator
from bookbridge.schema.order import PaymentMethod, ShippingAddress


class OrderIn(BaseModel):
    book_id: str = Field(..., min_length=1)
    payment_method: PaymentMethod
    address: ShippingAddress
    upi_id: Optional[str] = None

    @model_validator(mode="after")
    def upi_needs_id(self):
        if self.payment_method == PaymentMethod.UPI and not (self.upi_id or "").strip():
            raise ValueError("upi_id is required for UPI payments")
        return self
