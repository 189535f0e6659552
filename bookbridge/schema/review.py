from datetime import datetime
from pydantic import Field
from bookbridge.schema.base import Record


class Review(Record):
    id: str
    book_id: str
    user_id: str
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    created_at: datetime
