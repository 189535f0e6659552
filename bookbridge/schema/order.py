from datetime import datetime
from enum import Enum
from typing import Optional
from bookbridge.schema.base import Record


class PaymentMethod(str, Enum):
    COD = "cod"
    UPI = "upi"
    CARD = "card"
    NETBANKING = "netbanking"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ShippingAddress(Record):
    """Address snapshot embedded in the order; later address edits never reach it."""
    full_name: str
    street: str
    city: str
    state: str
    pincode: str
    phone: str


class Order(Record):
    id: str
    book_id: str
    user_id: str
    payment_method: PaymentMethod
    address: ShippingAddress
    status: OrderStatus = OrderStatus.PENDING
    upi_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
