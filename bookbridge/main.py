from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Callable, Optional
from bookbridge.auth.services import IdentityService
from bookbridge.cart.repository import CartRepository
from bookbridge.catalog.repository import CatalogRepository
from bookbridge.common.logging_setup import get_logger, setup_logging, shutdown_logging
from bookbridge.common.utils import now
from bookbridge.orders.repository import OrderRepository
from bookbridge.orders.services import OrderService
from bookbridge.reviews.repository import ReviewRepository
from bookbridge.storage._store import KeyValueStore, RedisStore
from bookbridge.storage.collection import ConcurrencyPolicy, Storage
from bookbridge.user.dependencies import IdentityContext, placeholder_identity
from bookbridge.user.repository import AddressRepository, ProfileRepository
from bookbridge.wishlist.repository import WishlistRepository

logger = get_logger("bookbridge.app")


@dataclass
class BookBridge:
    """Everything the UI layer calls into."""
    storage: Storage
    catalog: CatalogRepository
    cart: CartRepository
    wishlist: WishlistRepository
    addresses: AddressRepository
    profiles: ProfileRepository
    orders: OrderService
    reviews: ReviewRepository
    identity: IdentityService


def create_app(store: Optional[KeyValueStore] = None,
               identity: Optional[IdentityContext] = None,
               policy: Optional[ConcurrencyPolicy] = None,
               clock: Callable[[], datetime] = now) -> BookBridge:

    storage = Storage(store if store is not None else RedisStore(), policy=policy)
    identity = identity if identity is not None else placeholder_identity()

    cart = CartRepository(storage)
    app = BookBridge(
        storage=storage,
        catalog=CatalogRepository(storage, clock=clock),
        cart=cart,
        wishlist=WishlistRepository(storage),
        addresses=AddressRepository(storage, identity, clock=clock),
        profiles=ProfileRepository(storage, identity),
        orders=OrderService(OrderRepository(storage), cart, identity, clock=clock),
        reviews=ReviewRepository(storage, identity, clock=clock),
        identity=IdentityService(storage, clock=clock),
    )
    logger.info("app.created", extra={"write_policy": storage.policy.value})
    return app


@asynccontextmanager
async def app_lifespan(store: Optional[KeyValueStore] = None, **kwargs) -> AsyncIterator[BookBridge]:
    setup_logging()
    app = create_app(store=store, **kwargs)
    try:
        yield app
    finally:
        close = getattr(app.storage.store, "close", None)
        if close is not None:
            await close()
        shutdown_logging()
