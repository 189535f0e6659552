from typing import Optional
from pydantic import BaseModel, Field


class ReviewIn(BaseModel):
    rating: int = Field(5, ge=1, le=5)
    comment: str = Field(..., min_length=1)
    user_name: Optional[str] = None
