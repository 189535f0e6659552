from datetime import datetime
from typing import Callable, List, Optional
from uuid6 import uuid7
from bookbridge.common.utils import now
from bookbridge.reviews.constants import ANONYMOUS_REVIEWER, logger
from bookbridge.reviews.models import ReviewIn
from bookbridge.schema.review import Review
from bookbridge.storage.collection import Storage
from bookbridge.storage.constants import REVIEWS_KEY
from bookbridge.user.dependencies import IdentityContext, require_user_id


class ReviewRepository:
    """Reviews reference books by id only; a review may outlive its book."""

    def __init__(self, storage: Storage, identity: IdentityContext, clock: Callable[[], datetime] = now):
        self._reviews = storage.collection(REVIEWS_KEY, Review)
        self._identity = identity
        self._clock = clock

    async def add(self, book_id: str, data: ReviewIn) -> Review:
        user_id = require_user_id(self._identity)
        review = Review(
            id=str(uuid7()),
            book_id=book_id,
            user_id=user_id,
            user_name=(data.user_name or "").strip() or ANONYMOUS_REVIEWER,
            rating=data.rating,
            comment=data.comment,
            created_at=self._clock(),
        )
        await self._reviews.mutate(lambda items: (items + [review], None))
        logger.info("review.created", extra={"review_id": review.id, "book_id": book_id})
        return review

    async def list_for_book(self, book_id: str) -> List[Review]:
        """Newest first."""
        return [r for r in await self._reviews.load() if r.book_id == book_id][::-1]

    async def average_rating(self, book_id: str) -> Optional[float]:
        reviews = await self.list_for_book(book_id)
        if not reviews:
            return None
        return round(sum(r.rating for r in reviews) / len(reviews), 1)
