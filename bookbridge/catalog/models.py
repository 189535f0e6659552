from typing import Optional, Union
from pydantic import BaseModel, Field
from bookbridge.schema.book import BookCondition


class BookCreateIn(BaseModel):
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    price: Union[float, str]
    original_price: Optional[Union[float, str]] = None
    condition: BookCondition = BookCondition.GOOD
    image_url: str = ""
    seller_name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
