from datetime import datetime
from typing import Callable, Dict, List
from uuid6 import uuid7
from bookbridge.catalog.constants import (ALL_CATEGORIES, FEATURED_BOOKS_LIMIT, ORIGINAL_PRICE_FACTOR,
                                          RECENT_BOOKS_LIMIT, SUGGESTED_BOOKS_LIMIT, logger)
from bookbridge.catalog.models import BookCreateIn
from bookbridge.catalog.utils import fuzzy_match, normalize_price, price_value, shares_word, words_of
from bookbridge.common.custom_exceptions import NotFound
from bookbridge.common.utils import now
from bookbridge.schema.book import Book
from bookbridge.storage.collection import Storage
from bookbridge.storage.constants import BOOKS_KEY, RECENT_BOOKS_KEY


def present_book(book: Book) -> Book:
    """Copy of the book with display-ready prices."""
    price = normalize_price(book.price)
    if book.original_price is None:
        original = normalize_price(price_value(price) * ORIGINAL_PRICE_FACTOR)
    else:
        original = normalize_price(book.original_price)
    return book.model_copy(update={"price": price, "original_price": original})


class CatalogRepository:
    """Books for sale. The stored list is newest first."""

    def __init__(self, storage: Storage, clock: Callable[[], datetime] = now):
        self._books = storage.collection(BOOKS_KEY, Book)
        self._recent = storage.collection(RECENT_BOOKS_KEY, Book)
        self._clock = clock

    async def list_books(self) -> List[Book]:
        return [present_book(b) for b in await self._books.load()]

    async def add_book(self, data: BookCreateIn) -> Book:
        fields = data.model_dump(exclude={"price", "original_price"})
        book = Book(
            id=str(uuid7()),
            posted_date=self._clock(),
            price=normalize_price(data.price),
            original_price=normalize_price(data.original_price) if data.original_price is not None else None,
            **fields,
        )

        await self._books.mutate(lambda items: ([book] + items, None))

        def push_recent(items: List[Book]):
            recent = [book] + [b for b in items if b.id != book.id]
            return recent[:RECENT_BOOKS_LIMIT], None

        await self._recent.mutate(push_recent)

        logger.info("book.created", extra={"book_id": book.id, "category": book.category})
        return present_book(book)

    async def get_recently_added(self, limit: int = RECENT_BOOKS_LIMIT) -> List[Book]:
        recent = await self._recent.load()
        return [present_book(b) for b in recent[:min(limit, RECENT_BOOKS_LIMIT)]]

    async def get_featured_books(self, limit: int = FEATURED_BOOKS_LIMIT) -> List[Book]:
        books = await self._books.load()
        return [present_book(b) for b in books[:limit]]

    async def get_book_by_id(self, book_id: str) -> Book:
        for book in await self._books.load():
            if book.id == book_id:
                return present_book(book)

        logger.warning("book.not_found", extra={"book_id": book_id})
        raise NotFound(f"Book {book_id} not found")

    async def get_books_by_category(self, category: str) -> List[Book]:
        books = await self.list_books()
        if category == ALL_CATEGORIES:
            return books
        return [b for b in books if b.category == category]

    async def get_categories(self) -> Dict[str, int]:
        """Category name -> number of books, in first-seen order."""
        counts: Dict[str, int] = {}
        for book in await self._books.load():
            if book.category:
                counts[book.category] = counts.get(book.category, 0) + 1
        return counts

    async def get_suggested_books(self, current_id: str) -> List[Book]:
        """Books sharing a title/author word with the current one.

        A word-overlap filter, not a relevance ranking: results keep collection
        order and are capped at SUGGESTED_BOOKS_LIMIT.
        """
        books = await self._books.load()
        current = next((b for b in books if b.id == current_id), None)
        if current is None:
            logger.warning("book.not_found", extra={"book_id": current_id})
            raise NotFound(f"Book {current_id} not found")

        current_words = words_of(current.title, current.author)
        suggested = []
        for book in books:
            if book.id == current_id:
                continue
            if shares_word(current_words, words_of(book.title, book.author)):
                suggested.append(present_book(book))
            if len(suggested) == SUGGESTED_BOOKS_LIMIT:
                break
        return suggested

    async def search_books(self, query: str) -> List[Book]:
        books = await self.list_books()
        if not query.strip():
            return books
        return [
            b for b in books
            if fuzzy_match(b.title, query) or fuzzy_match(b.author, query) or fuzzy_match(b.category, query)
        ]
