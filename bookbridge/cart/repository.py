from typing import List
from bookbridge.cart.constants import logger
from bookbridge.catalog.utils import normalize_price, price_value
from bookbridge.schema.book import Book
from bookbridge.storage.collection import Storage
from bookbridge.storage.constants import CART_KEY


class BookSetRepository:
    """Book snapshots kept as a set by book id, in the order they were added."""

    collection_name = CART_KEY
    event_prefix = "cart"

    def __init__(self, storage: Storage):
        self._items = storage.collection(self.collection_name, Book)

    async def add(self, book: Book) -> bool:
        """Returns False when the book was already there (nothing written changes)."""

        def add_once(items: List[Book]):
            if any(it.id == book.id for it in items):
                return items, False
            return items + [book], True

        added = await self._items.mutate(add_once)
        if added:
            logger.info(f"{self.event_prefix}.item_added", extra={"book_id": book.id})
        else:
            logger.debug(f"{self.event_prefix}.item_present", extra={"book_id": book.id})
        return added

    async def remove(self, book_id: str) -> None:
        await self._items.mutate(lambda items: ([it for it in items if it.id != book_id], None))
        logger.info(f"{self.event_prefix}.item_removed", extra={"book_id": book_id})

    async def list(self) -> List[Book]:
        return await self._items.load()

    async def contains(self, book_id: str) -> bool:
        return any(it.id == book_id for it in await self._items.load())

    async def clear(self) -> None:
        await self._items.clear()
        logger.info(f"{self.event_prefix}.cleared")


class CartRepository(BookSetRepository):
    collection_name = CART_KEY
    event_prefix = "cart"

    async def total(self) -> str:
        """Sum of item prices in canonical form."""
        items = await self._items.load()
        return normalize_price(sum(price_value(it.price) for it in items))
