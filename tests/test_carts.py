import pytest
from bookbridge.catalog.models import BookCreateIn


async def add_listing(app, title, price):
    return await app.catalog.add_book(BookCreateIn(title=title, author="A", price=price,
                                                   seller_name="S", location="Goa"))


@pytest.mark.asyncio
async def test_cart_is_a_set_by_book_id(app):
    book = await add_listing(app, "Dune", 450)

    assert await app.cart.add(book) is True
    assert await app.cart.add(book) is False
    assert [b.id for b in await app.cart.list()] == [book.id]
    assert await app.cart.contains(book.id)


@pytest.mark.asyncio
async def test_cart_keeps_insertion_order_and_totals(app):
    first = await add_listing(app, "Dune", 450)
    second = await add_listing(app, "Emma", "199.5")
    await app.cart.add(first)
    await app.cart.add(second)

    assert [b.title for b in await app.cart.list()] == ["Dune", "Emma"]
    assert await app.cart.total() == "₹649.50"


@pytest.mark.asyncio
async def test_remove_is_idempotent(app):
    book = await add_listing(app, "Dune", 450)
    await app.cart.add(book)

    await app.cart.remove(book.id)
    await app.cart.remove(book.id)
    assert await app.cart.list() == []
    assert await app.cart.total() == "₹0.00"


@pytest.mark.asyncio
async def test_wishlist_is_separate_from_cart(app):
    book = await add_listing(app, "Dune", 450)
    await app.wishlist.add(book)

    assert await app.wishlist.contains(book.id)
    assert not await app.cart.contains(book.id)

    await app.wishlist.clear()
    assert await app.wishlist.list() == []
