import asyncio
import orjson
import pytest
from bookbridge.cart.repository import CartRepository
from bookbridge.common.custom_exceptions import StorageFailure
from bookbridge.schema.book import Book
from bookbridge.schema.user import UserProfile
from bookbridge.storage.codec import deserialize, serialize
from bookbridge.storage.collection import ConcurrencyPolicy, Storage
from bookbridge.storage.constants import CART_KEY, PROFILES_KEY


def make_book(book_id: str, price="₹100.00") -> Book:
    return Book(id=book_id, title=f"Book {book_id}", author="Someone", price=price, condition="Good",
                seller_name="Seller", location="Pune", posted_date="2025-01-01T00:00:00Z")


@pytest.mark.asyncio
async def test_missing_key_reads_empty(storage):
    assert await storage.collection(PROFILES_KEY, UserProfile).load() == []


@pytest.mark.asyncio
async def test_corrupt_value_reads_empty(store, storage):
    store.data[PROFILES_KEY] = "{not json"
    assert await storage.collection(PROFILES_KEY, UserProfile).load() == []

    store.data[PROFILES_KEY] = '{"id": "x"}'
    assert await storage.collection(PROFILES_KEY, UserProfile).load() == []


def test_bad_rows_are_skipped():
    raw = orjson.dumps([
        {"id": "u1", "name": "Asha", "email": "asha@x.com"},
        {"id": "u2"},
        "garbage",
    ]).decode()
    items = deserialize(raw, UserProfile, PROFILES_KEY)
    assert [p.id for p in items] == ["u1"]


def test_serialized_form_uses_camel_case_keys():
    data = orjson.loads(serialize([make_book("b1")]))
    assert data[0]["sellerName"] == "Seller"
    assert data[0]["postedDate"].startswith("2025-01-01")
    assert "originalPrice" not in data[0]


@pytest.mark.asyncio
async def test_read_failure_raises_storage_failure(store, storage):
    store.fail_on_get.add(CART_KEY)
    with pytest.raises(StorageFailure) as exc:
        await CartRepository(storage).list()
    assert exc.value.operation == "read"
    assert exc.value.collection == CART_KEY


@pytest.mark.asyncio
async def test_write_failure_raises_storage_failure(store, storage):
    store.fail_on_set.add(CART_KEY)
    with pytest.raises(StorageFailure) as exc:
        await CartRepository(storage).add(make_book("b1"))
    assert exc.value.operation == "write"
    assert CART_KEY not in store.data


@pytest.mark.asyncio
async def test_mutate_aborts_when_fn_raises(store, storage):
    cart = CartRepository(storage)
    await cart.add(make_book("b1"))
    before = store.data[CART_KEY]

    def boom(items):
        raise ValueError("nope")

    with pytest.raises(ValueError):
        await storage.collection(CART_KEY, Book).mutate(boom)
    assert store.data[CART_KEY] == before


@pytest.mark.asyncio
async def test_concurrent_adds_lose_an_update_without_lock(store):
    cart = CartRepository(Storage(store, policy=ConcurrencyPolicy.NONE))

    await asyncio.gather(cart.add(make_book("b1")), cart.add(make_book("b2")))

    # both cycles read the empty list before either wrote
    assert len(await cart.list()) == 1


@pytest.mark.asyncio
async def test_concurrent_adds_all_survive_with_lock(store):
    cart = CartRepository(Storage(store, policy=ConcurrencyPolicy.LOCK))

    await asyncio.gather(*(cart.add(make_book(f"b{i}")) for i in range(5)))

    assert sorted(b.id for b in await cart.list()) == [f"b{i}" for i in range(5)]


def test_policy_defaults_to_lock(store):
    assert Storage(store).policy is ConcurrencyPolicy.LOCK
