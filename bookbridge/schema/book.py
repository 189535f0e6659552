from datetime import datetime
from enum import Enum
from typing import Optional, Union
from bookbridge.schema.base import Record


class BookCondition(str, Enum):
    LIKE_NEW = "Like New"
    GOOD = "Good"
    FAIR = "Fair"


class Book(Record):
    id: str
    title: str
    author: str
    # numeric in older installs, canonical "₹450.00" string once normalized
    price: Union[float, str]
    original_price: Optional[Union[float, str]] = None
    condition: BookCondition
    image_url: str = ""
    seller_name: str
    location: str
    posted_date: datetime
    category: Optional[str] = None
    description: Optional[str] = None
