import pytest
from pydantic import ValidationError
from bookbridge.catalog.models import BookCreateIn
from bookbridge.common.custom_exceptions import CartNotCleared, NotFound, error_payload
from bookbridge.orders.models import OrderIn
from bookbridge.schema.order import OrderStatus, PaymentMethod, ShippingAddress
from bookbridge.storage.constants import CART_KEY

SHIP_TO = ShippingAddress(full_name="Asha", street="12 MG Road", city="Bengaluru", state="KA",
                          pincode="560001", phone="9876543210")


async def book_in_cart(app):
    book = await app.catalog.add_book(BookCreateIn(title="Dune", author="Herbert", price=450,
                                                   seller_name="S", location="Goa"))
    await app.cart.add(book)
    return book


@pytest.mark.asyncio
async def test_order_empties_the_cart(app, clock):
    book = await book_in_cart(app)

    order = await app.orders.create_order(OrderIn(book_id=book.id, payment_method="cod", address=SHIP_TO))

    assert order.status == OrderStatus.PENDING
    assert order.user_id == "user123"
    assert order.created_at == clock()
    assert await app.cart.list() == []
    assert [o.id for o in await app.orders.list_orders()] == [order.id]


@pytest.mark.asyncio
async def test_upi_orders_keep_the_upi_id(app):
    book = await book_in_cart(app)

    order = await app.orders.create_order(OrderIn(book_id=book.id, payment_method="upi",
                                                  address=SHIP_TO, upi_id="asha@okbank"))
    assert order.upi_id == "asha@okbank"

    card = await app.orders.create_order(OrderIn(book_id=book.id, payment_method="card",
                                                 address=SHIP_TO, upi_id="ignored@ok"))
    assert card.upi_id is None


def test_upi_without_id_is_rejected():
    with pytest.raises(ValidationError):
        OrderIn(book_id="b1", payment_method="upi", address=SHIP_TO)


@pytest.mark.asyncio
async def test_failed_cart_clear_reports_the_saved_order(app, store):
    book = await book_in_cart(app)
    store.fail_on_set.add(CART_KEY)

    with pytest.raises(CartNotCleared) as exc:
        await app.orders.create_order(OrderIn(book_id=book.id, payment_method="cod", address=SHIP_TO))

    saved = await app.orders.get_order(exc.value.order.id)
    assert saved.book_id == book.id
    assert error_payload(exc.value)["error"]["details"]["order_id"] == saved.id

    store.fail_on_set.clear()
    await app.cart.clear()
    assert await app.cart.list() == []


@pytest.mark.asyncio
async def test_status_update_and_ownership(app, identity, clock):
    book = await book_in_cart(app)
    order = await app.orders.create_order(OrderIn(book_id=book.id, payment_method="cod", address=SHIP_TO))

    clock.advance(hours=1)
    updated = await app.orders.update_order_status(order.id, OrderStatus.COMPLETED)
    assert updated.status == OrderStatus.COMPLETED
    assert updated.updated_at == clock()

    identity.user_id = "intruder"
    with pytest.raises(NotFound):
        await app.orders.get_order(order.id)
    with pytest.raises(NotFound):
        await app.orders.update_order_status(order.id, OrderStatus.CANCELLED)

    identity.user_id = "user123"
    assert (await app.orders.get_order(order.id)).status == OrderStatus.COMPLETED


@pytest.mark.asyncio
async def test_unknown_order_is_not_found(app):
    with pytest.raises(NotFound):
        await app.orders.update_order_status("nope", OrderStatus.PROCESSING)


def test_order_summary_adds_delivery(app):
    summary = app.orders.order_summary("₹450.00", PaymentMethod.UPI)
    assert summary == {
        "payment_method": "upi",
        "summary": {"subtotal": "₹450.00", "delivery": "₹40.00", "total": "₹490.00"},
    }
