from datetime import datetime
from bookbridge.schema.base import Record


class Address(Record):
    id: str
    user_id: str
    full_name: str
    street: str
    city: str
    state: str
    pincode: str
    phone: str
    created_at: datetime
